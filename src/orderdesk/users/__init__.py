"""
orderdesk.users

Users service: registration, login (token issuing), profile and admin role management.
"""
