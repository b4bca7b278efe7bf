"""
orderdesk.api

HTTP plumbing shared by every service.

Responsibilities:
- Response envelope and error handlers.
- Common dependencies (settings from app.state).
- Health endpoint.
"""
