"""
Client-side state: request lifecycles and the booking wizard.
"""
