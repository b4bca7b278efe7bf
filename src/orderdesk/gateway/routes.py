from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from starlette.responses import Response

from orderdesk.auth.deps import jwt_config_dep
from orderdesk.auth.tokens import JwtConfig
from orderdesk.gateway.auth import authenticate
from orderdesk.gateway.proxy import Upstream, UpstreamProxy

router = APIRouter(tags=["gateway"])

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def upstream_path(request: Request, prefix: str) -> str:
    """
    Path suffix to forward, still percent-encoded as the client sent it.

    An encoded `?` or `/` inside an id must stay inside that segment upstream.
    """
    raw = request.scope.get("raw_path")
    if raw:
        raw_path = raw.decode("latin-1").split("?", 1)[0]
        if raw_path.startswith(prefix):
            return raw_path[len(prefix) :]
    return quote(request.path_params.get("path", ""), safe="/")


def proxy_dep(request: Request) -> UpstreamProxy:
    return request.app.state.proxy  # type: ignore[no-any-return]


async def _proxy(
    request: Request, *, service: str, cfg: JwtConfig, proxy: UpstreamProxy
) -> Response:
    principal = authenticate(request, cfg=cfg)
    upstream: Upstream = request.app.state.upstreams[service]
    return await proxy.forward(
        upstream=upstream,
        path=upstream_path(request, f"/v1/{service}"),
        request=request,
        principal=principal,
        request_id=request.state.request_id,
    )


@router.api_route("/v1/users", methods=PROXY_METHODS, include_in_schema=False)
@router.api_route("/v1/users/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
async def users_proxy(
    request: Request,
    cfg: JwtConfig = Depends(jwt_config_dep),
    proxy: UpstreamProxy = Depends(proxy_dep),
) -> Response:
    return await _proxy(request, service="users", cfg=cfg, proxy=proxy)


@router.api_route("/v1/orders", methods=PROXY_METHODS, include_in_schema=False)
@router.api_route("/v1/orders/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
async def orders_proxy(
    request: Request,
    cfg: JwtConfig = Depends(jwt_config_dep),
    proxy: UpstreamProxy = Depends(proxy_dep),
) -> Response:
    return await _proxy(request, service="orders", cfg=cfg, proxy=proxy)
