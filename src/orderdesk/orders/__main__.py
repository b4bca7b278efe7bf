"""
Entrypoint: `python -m orderdesk.orders`.
"""

from __future__ import annotations

import uvicorn

from orderdesk.orders.app import create_orders_app
from orderdesk.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_orders_app(settings=settings)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_config=None)


if __name__ == "__main__":
    main()
