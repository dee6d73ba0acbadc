from __future__ import annotations

import typer

from .auth_state import resolve_auth_context
from .commands import auth_cmd, health_cmd, settings_cmd, upload_cmd
from .commands.messages_cmd import app as messages_app
from .commands.projects_cmd import app as projects_app
from .commands.search_cmd import app as search_app
from .commands.teams_cmd import app as teams_app
from .commands.users_cmd import app as users_app
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="onecrew",
        help="OneCrew CLI",
        no_args_is_help=True,
    )

    ctx = resolve_auth_context()

    # Always available
    app.add_typer(settings_cmd.app, name="settings")
    app.add_typer(auth_cmd.app, name="auth")
    app.command("health")(health_cmd.health)

    if ctx.state == "authed":
        app.command("whoami")(auth_cmd.whoami_impl)
        app.add_typer(users_app, name="users")
        app.add_typer(projects_app, name="projects")
        app.add_typer(teams_app, name="teams")
        app.add_typer(messages_app, name="messages")
        app.add_typer(search_app, name="search")
        app.command("upload")(upload_cmd.upload)

    @app.callback()
    def _main(
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
    ):
        setup_logging(verbose)

    return app


app = _build_app()
