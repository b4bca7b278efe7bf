"""
orderdesk.gateway

API gateway: verifies bearer tokens once and reverse-proxies to the users and
orders services, attaching the verified identity as a trusted header.
"""
