"""
orderdesk.auth

Authentication/authorization package.

Responsibilities:
- Identity assertion issuing and verification (JWT).
- Password verifier hashing.
- Identity propagation across the gateway -> backend trust boundary.
- Authorization guard and FastAPI dependencies.
"""
