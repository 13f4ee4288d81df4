from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Flask, abort, jsonify, redirect, render_template, request, url_for

from ..container import Container
from ..core.enums import DispatchStatus, Role
from ..core.exceptions import AuthenticationError
from ..listing.projection import ViewState
from ..listing.screen import ListScreen, ScreenConfig
from .common import credentials_for, forward_to_flash, render_auth_required, role_required, uploaded_attachments, wants_json

logger = logging.getLogger(__name__)

HTTP_STATUS = {
    DispatchStatus.SUCCEEDED: 200,
    DispatchStatus.REJECTED: 422,
    DispatchStatus.BUSY: 409,
    DispatchStatus.FAILED: 502,
}


def register(app: Flask, container: Container) -> None:
    def config_for(role: Role, key: str) -> ScreenConfig:
        config = container.screens.get(role, key)
        if config is None:
            abort(404)
        return config

    def build_screen(role: Role, key: str) -> ListScreen:
        channel = container.notification_channel()
        if not wants_json():
            forward_to_flash(channel)
        return container.list_screen(config_for(role, key), credentials_for(role), channel)

    def form_payload() -> Dict[str, Any]:
        payload: Dict[str, Any] = {k: v for k, v in request.form.items() if k != "ids"}
        payload.update(uploaded_attachments())
        return payload

    def back_to_list(role: Role, key: str):
        args = {k: v for k, v in request.args.items() if k in {"q", "sort", "dir", "status"}}
        return redirect(url_for("listing", role=role.value, screen=key, **args))

    def load_failed(page: ListScreen, role: Role, key: str):
        page.channel.error(page.error)
        if wants_json():
            return jsonify({"result": None, "row": None, "notification": page.channel.snapshot()}), 502
        return back_to_list(role, key)

    @app.route("/<role>/<screen>", endpoint="listing")
    @role_required
    async def listing(role: Role, screen: str):
        page = build_screen(role, screen)
        try:
            await page.open()
        except AuthenticationError as e:
            return render_auth_required(role, e)

        view = ViewState.from_args(request.args, default_sort=page.config.default_sort)
        rows = page.rows(view)
        if wants_json():
            return jsonify({"items": rows, "total": len(page.store), "error": page.error})
        return render_template(
            "listing/index.html",
            role=role,
            screen=page,
            config=page.config,
            rows=rows,
            view=view,
            row_states={str(r["id"]): page.row_state(r["id"]) for r in rows},
            nav=container.screens.for_role(role),
        )

    @app.route("/<role>/<screen>/new", methods=["GET", "POST"], endpoint="listing_create")
    @role_required
    async def create(role: Role, screen: str):
        page = build_screen(role, screen)
        if not page.config.can_create:
            abort(404)
        values: Dict[str, Any] = {}
        if request.method == "POST":
            values = request.form.to_dict()
            try:
                await page.open()
            except AuthenticationError as e:
                return render_auth_required(role, e)
            created = await page.create(values, uploaded_attachments())
            if wants_json():
                return jsonify({"ok": created, "notification": page.channel.snapshot()}), 201 if created else 422
            if created:
                return back_to_list(role, screen)
        return render_template(
            "listing/form.html",
            role=role,
            config=page.config,
            title=page.config.create_label,
            fields=page.config.create_fields,
            values=values,
            action_url=url_for("listing_create", role=role.value, screen=screen),
            nav=container.screens.for_role(role),
        )

    @app.route("/<role>/<screen>/<entity_id>/<action>", methods=["GET", "POST"], endpoint="listing_action")
    @role_required
    async def row_action(role: Role, screen: str, entity_id: str, action: str):
        page = build_screen(role, screen)
        row_action = page.config.action(action)
        if request.method == "GET":
            if row_action is None or not row_action.fields:
                abort(404)
            return render_template(
                "listing/form.html",
                role=role,
                config=page.config,
                title=row_action.label,
                fields=row_action.fields,
                values={},
                action_url=url_for("listing_action", role=role.value, screen=screen, entity_id=entity_id, action=action, **request.args),
                nav=container.screens.for_role(role),
            )

        try:
            await page.open()
        except AuthenticationError as e:
            return render_auth_required(role, e)

        if page.error is not None:
            return load_failed(page, role, screen)

        result = await page.dispatch(entity_id, action, form_payload())
        if wants_json():
            return jsonify(
                {
                    "result": result.to_dict(),
                    "row": page.store.get(entity_id),
                    "notification": page.channel.snapshot(),
                }
            ), HTTP_STATUS[result.status]
        return back_to_list(role, screen)

    @app.route("/<role>/<screen>/bulk/<action>", methods=["POST"], endpoint="listing_bulk")
    @role_required
    async def bulk_action(role: Role, screen: str, action: str):
        page = build_screen(role, screen)
        try:
            await page.open()
        except AuthenticationError as e:
            return render_auth_required(role, e)

        if page.error is not None:
            return load_failed(page, role, screen)

        ids = request.form.getlist("ids")
        if not ids and request.is_json:
            ids = list((request.get_json(silent=True) or {}).get("ids") or [])
        results = await page.dispatch_many(ids, action, form_payload())
        if wants_json():
            return jsonify(
                {
                    "results": [r.to_dict() for r in results],
                    "notification": page.channel.snapshot(),
                }
            )
        return back_to_list(role, screen)

    @app.route("/<role>/<screen>/commands/<name>", methods=["POST"], endpoint="listing_command")
    @role_required
    async def command(role: Role, screen: str, name: str):
        page = build_screen(role, screen)
        if page.config.command(name) is None:
            abort(404)
        if not page.client.has_token():
            return render_auth_required(role, AuthenticationError("Token non trouvé. Veuillez vous reconnecter."))

        ok = await page.run_command(name, request.form.to_dict())
        if wants_json():
            return jsonify({"ok": ok, "notification": page.channel.snapshot()}), 200 if ok else 422
        return back_to_list(role, screen)
