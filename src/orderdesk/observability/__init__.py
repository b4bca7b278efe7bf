"""
orderdesk.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request-id propagation and per-request log context.
"""
