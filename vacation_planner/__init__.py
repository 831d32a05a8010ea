"""
Vacation Planner client core.

This package implements the client side of a vacation planner: it plans trips
through a remote planning service, tracks every remote call through a uniform
request lifecycle, drives the booking wizard, and manages saved trips.
"""

__version__ = "0.1.0"
