"""
Domain Layer

Entities, value objects, repository interfaces and the order status rules.
This layer knows nothing about storage or the backend.
"""
