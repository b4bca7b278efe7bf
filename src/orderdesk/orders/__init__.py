"""
orderdesk.orders

Orders service: order creation, visibility-scoped listing and the status state machine.
"""
