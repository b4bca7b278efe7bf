"""
Entrypoint: `python -m orderdesk.users`.
"""

from __future__ import annotations

import uvicorn

from orderdesk.settings import get_settings
from orderdesk.users.app import create_users_app


def main() -> None:
    settings = get_settings()
    app = create_users_app(settings=settings)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_config=None)


if __name__ == "__main__":
    main()
