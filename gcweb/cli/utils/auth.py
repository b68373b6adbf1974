"""Session helpers for CLI commands."""

import typer
from pydantic import SecretStr

from gcweb.api.client import GCWebClient
from gcweb.config import Config, load_config


def get_auth_cookie(auth_cookie: str | None = None, config: Config | None = None) -> str:
    """Get the session cookie from the parameter, the environment, or a prompt.

    Note:
        The cookie is only read, never written to any config file.
    """
    config = config or load_config()

    final_cookie = auth_cookie
    if not final_cookie and config.auth_cookie:
        final_cookie = config.auth_cookie.get_secret_value()
    if not final_cookie:
        final_cookie = typer.prompt(
            "geocaching.com session cookie (gspkauth)",
            hide_input=True,
            confirmation_prompt=False,
        )
    return final_cookie


def with_client(auth_cookie: str | None = None) -> GCWebClient:
    """Build a client for an authenticated session.

    Returns the client, not an open session; use it in a ``with`` statement.
    """
    config = load_config()
    cookie = get_auth_cookie(auth_cookie, config)
    return GCWebClient(config=config.model_copy(update={"auth_cookie": SecretStr(cookie)}))
