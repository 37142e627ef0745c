"""
Services module for business logic separation.

This module contains service classes that encapsulate the link registry,
redirect handling, visit recording and analytics aggregation, keeping them
separate from API endpoints and database models.
"""
