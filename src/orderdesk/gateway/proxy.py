"""
orderdesk.gateway.proxy

HTTP client boundary used by the gateway to call backend services.

Responsibilities:
- Forward method, path, query and body to the selected upstream.
- Strip hop-by-hop headers and any client-supplied identity header.
- Attach the gateway-verified identity and the request id.
- Map transport failures, timeouts and upstream 5xx to `UpstreamError`.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
from starlette.requests import Request
from starlette.responses import Response

from orderdesk.auth.identity import encode_identity
from orderdesk.auth.models import Principal
from orderdesk.errors import UpstreamError
from orderdesk.observability.logging import get_logger
from orderdesk.observability.middleware import REQUEST_ID_HEADER

log = get_logger(__name__)

HOP_BY_HOP = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailers",
        "transfer-encoding",
        "upgrade",
        "host",
        "content-length",
    }
)
# httpx hands back decoded bodies, so the upstream encoding no longer applies.
_RESPONSE_SKIP = HOP_BY_HOP | {"content-encoding"}


@dataclass(frozen=True, slots=True)
class Upstream:
    name: str
    base_url: str

    def url_for(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"


class UpstreamProxy:
    def __init__(self, *, http: httpx.AsyncClient, identity_header: str) -> None:
        self._http = http
        self._identity_header = identity_header.lower()

    def _outbound_headers(
        self, request: Request, *, principal: Principal | None, request_id: str
    ) -> dict[str, str]:
        headers = {
            k: v
            for k, v in request.headers.items()
            if k not in HOP_BY_HOP and k != self._identity_header and k != REQUEST_ID_HEADER
        }
        headers[REQUEST_ID_HEADER] = request_id
        if principal is not None:
            headers[self._identity_header] = encode_identity(principal)
        return headers

    async def forward(
        self,
        *,
        upstream: Upstream,
        path: str,
        request: Request,
        principal: Principal | None,
        request_id: str,
    ) -> Response:
        url = upstream.url_for(path)
        if request.url.query:
            url = f"{url}?{request.url.query}"

        try:
            r = await self._http.request(
                request.method,
                url,
                headers=self._outbound_headers(
                    request, principal=principal, request_id=request_id
                ),
                content=await request.body(),
            )
        except httpx.HTTPError as e:
            log.warning("upstream.error", upstream=upstream.name, error_type=type(e).__name__)
            raise UpstreamError() from e

        if r.status_code >= 500:
            # Backend failure detail stays behind the gateway.
            log.warning("upstream.error", upstream=upstream.name, status=r.status_code)
            raise UpstreamError()

        return Response(
            content=r.content,
            status_code=r.status_code,
            headers={k: v for k, v in r.headers.items() if k.lower() not in _RESPONSE_SKIP},
        )


# --- Module Notes -----------------------------------------------------------
# One pooled AsyncClient per gateway process; the timeout comes from settings.
