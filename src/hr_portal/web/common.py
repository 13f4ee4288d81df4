from __future__ import annotations

from functools import wraps
from typing import Dict, Optional

from flask import abort, current_app, flash, jsonify, render_template, request, session
from werkzeug.utils import secure_filename

from ..api.credentials import MappingCredentials
from ..api.transport import Attachment
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..listing.notifications import Notification, NotificationChannel

NO_TOKEN = "Token non trouvé. Veuillez vous reconnecter."
WRONG_SPACE = "Cet espace est réservé à un autre profil."


def parse_role(value: str) -> Role:
    try:
        return Role(value)
    except ValueError:
        abort(404)


def credentials_for(role: Role) -> MappingCredentials:
    return MappingCredentials(session, role)


def wants_json() -> bool:
    accept = request.accept_mimetypes
    return accept.accept_json and not accept.accept_html


def forward_to_flash(channel: NotificationChannel) -> None:
    """Every notification shown during the request becomes a flashed message."""

    def listener(note: Optional[Notification]) -> None:
        if note is not None:
            flash(note.message, note.kind.value)

    channel.subscribe(listener)


def uploaded_attachments() -> Dict[str, Attachment]:
    out: Dict[str, Attachment] = {}
    for name, storage in request.files.items():
        if storage is None or not storage.filename:
            continue
        out[name] = Attachment(
            filename=secure_filename(storage.filename) or storage.filename,
            content_type=storage.mimetype or "application/octet-stream",
            content=storage.read(),
        )
    return out


def render_auth_required(role: Role, error: AuthenticationError):
    if wants_json():
        return jsonify({"error": error.message}), 401
    return render_template("auth_required.html", role=role, message=error.message), 401


def render_forbidden(role: Role, error: AuthorizationError):
    if wants_json():
        return jsonify({"error": error.message}), 403
    return render_template("403.html", role=role, message=error.message), 403


def role_required(view):
    """Resolve `<role>` and refuse to go further without that role's token.

    Note: The token is never checked here, only its presence; the API
    decides whether it is still valid.
    """

    @wraps(view)
    def wrapper(role: str, *args, **kwargs):
        parsed = parse_role(role)
        if not credentials_for(parsed).get_token():
            others = [r for r in Role if r is not parsed and credentials_for(r).get_token()]
            if others:
                return render_forbidden(parsed, AuthorizationError(WRONG_SPACE))
            return render_auth_required(parsed, AuthenticationError(NO_TOKEN))
        return current_app.ensure_sync(view)(parsed, *args, **kwargs)

    return wrapper
