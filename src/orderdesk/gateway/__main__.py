"""
Entrypoint: `python -m orderdesk.gateway`.
"""

from __future__ import annotations

import uvicorn

from orderdesk.gateway.app import create_gateway_app
from orderdesk.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_gateway_app(settings=settings)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_config=None)


if __name__ == "__main__":
    main()
