"""
keygate.api.__main__

Entrypoint for running the proxy via `python -m keygate.api` or `keygate-server`.

Responsibilities:
- Load settings.
- Create the app.
- Start uvicorn with structlog-compatible logging and no headers of its own.
"""

from __future__ import annotations

import uvicorn

from keygate.api.app import create_app
from keygate.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
        access_log=False,
        # Relayed upstream headers already carry Server/Date; don't add a second copy.
        server_header=False,
        date_header=False,
    )


if __name__ == "__main__":
    main()
