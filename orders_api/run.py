"""Entry point that serves the Orders API with uvicorn.

Host and port are read from ``SERVER_HOST`` and ``SERVER_PORT``
(defaults ``0.0.0.0`` and ``3000``); see ``orders_api.app.core.config``
for the remaining settings.

Usage:
    python -m orders_api.run
    orders-api            # console script installed with the package
"""

import logging

from uvicorn import Config, Server

from orders_api.app.core.config import settings
from orders_api.app.main import app


def main() -> None:
    logging.getLogger(__name__).info(
        "Starting %s on %s:%s with %s repository",
        settings.project_name,
        settings.server_host,
        settings.server_port,
        settings.repository_backend,
    )
    config = Config(
        app=app,
        host=settings.server_host,
        port=settings.server_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    try:
        server.run()
    except (KeyboardInterrupt, SystemExit):
        pass


if __name__ == "__main__":
    main()
