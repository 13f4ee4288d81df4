from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .common import credentials_for, parse_role

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/", endpoint="index")
    def index():
        for role in (Role.ADMIN, Role.EMPLOYEE):
            if credentials_for(role).get_token():
                return redirect(url_for("dashboard", role=role.value))
        return render_template("auth/index.html")

    @app.route("/login/<role>", methods=["GET", "POST"], endpoint="login")
    def login(role: str):
        parsed = parse_role(role)
        if credentials_for(parsed).get_token() and request.method == "GET":
            return redirect(url_for("dashboard", role=parsed.value))

        email = ""
        if request.method == "POST":
            email = request.form.get("email", "")
            password = request.form.get("password", "")
            try:
                result = container.auth_service.login(parsed, email, password)
            except (AuthenticationError, ValidationError) as e:
                flash(e.message, "error")
                return render_template("auth/login.html", role=parsed, email=email), 401
            except Exception:
                logger.exception("login crashed role=%s", parsed.value)
                flash("Une erreur est survenue. Veuillez réessayer plus tard.", "error")
                return render_template("auth/login.html", role=parsed, email=email), 500

            credentials_for(parsed).save(result.token)
            session[f"{parsed.value}_name"] = result.display_name or email
            flash("Connexion réussie !", "success")
            return redirect(url_for("dashboard", role=parsed.value))

        return render_template("auth/login.html", role=parsed, email=email)

    @app.route("/logout/<role>", methods=["POST"], endpoint="logout")
    def logout(role: str):
        parsed = parse_role(role)
        credentials = credentials_for(parsed)
        container.auth_service.logout(parsed, credentials.get_token())
        credentials.clear()
        session.pop(f"{parsed.value}_name", None)
        flash("Vous avez été déconnecté.", "success")
        return redirect(url_for("login", role=parsed.value))
