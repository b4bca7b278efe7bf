"""
orderdesk.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all three services.
- Hide secrets from repr/logging (JWT secret, seed password).
- Offer a cached settings instance for process entrypoints.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    One settings shape shared by gateway, users and orders.
    Each process reads only the fields it needs; the app factory receives the
    instance explicitly and parks it on `app.state`.
    """

    model_config = SettingsConfigDict(env_prefix="ORDERDESK_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "orderdesk"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "orderdesk-users"
    jwt_audience: str = "orderdesk"
    jwt_secret: str = Field(default="dev-secret-change-me-0123456789abcdef", repr=False)
    token_ttl_minutes: int = Field(default=12 * 60, ge=1)

    # Trust boundary: header the gateway sets after verifying a bearer token.
    identity_header: str = "x-user"

    # Persistence (one JSON document per service under this directory)
    data_dir: Path = Path("./data")

    # Gateway upstreams
    users_url: str = "http://localhost:4001"
    orders_url: str = "http://localhost:4002"
    upstream_timeout_seconds: float = Field(default=10.0, gt=0)

    # Rate-limit surface (requests per window). Enforcement sits in front of the gateway.
    rate_limit_window_seconds: int = Field(default=60, ge=1)
    rate_limit_max: int = Field(default=100, ge=1)

    # Orders
    order_transition_policy: Literal["terminal_lock", "adjacency"] = "terminal_lock"

    # Users: optional bootstrap admin, applied only to an empty collection.
    seed_admin_email: str | None = None
    seed_admin_password: str | None = Field(default=None, repr=False)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Entrypoints only; request handling reads settings from app.state.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Ports default to the gateway; run users/orders with ORDERDESK_API_PORT set.
