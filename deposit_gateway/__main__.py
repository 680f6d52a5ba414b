"""Run the gateway with uvicorn: ``python -m deposit_gateway``."""

import uvicorn

from deposit_gateway.core.config import get_settings
from deposit_gateway.main import create_app


def main() -> None:
    settings = get_settings()
    # uvicorn stops accepting connections on SIGINT/SIGTERM and drains in-flight requests.
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
