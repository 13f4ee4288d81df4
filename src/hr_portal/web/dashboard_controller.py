from __future__ import annotations

from flask import Flask, render_template

from ..container import Container
from ..core.enums import Role
from ..screens.dashboard import build_dashboard
from .common import credentials_for, role_required


def register(app: Flask, container: Container) -> None:
    @app.route("/<role>/dashboard", endpoint="dashboard")
    @role_required
    async def dashboard(role: Role):
        channel = container.notification_channel()
        credentials = credentials_for(role)
        screens = [container.list_screen(c, credentials, channel) for c in container.screens.dashboard(role)]
        tiles = await build_dashboard(screens)
        return render_template(
            "dashboard.html",
            role=role,
            tiles=tiles,
            nav=container.screens.for_role(role),
        )
