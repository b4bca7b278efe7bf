"""
orderdesk.storage

Persistence package.

Responsibilities:
- File-backed JSON collections with serialized read-modify-write cycles.
"""
