"""
Trip data models, currency metadata and the trip repository.
"""
