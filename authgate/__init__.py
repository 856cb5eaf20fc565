# authgate/__init__.py

"""
AuthGate: JWT authentication and token-lifecycle service.

Hexagonal layout:
    domain/       token claims, principal, exceptions, token service
    application/  ports, DTOs and the login/refresh/logout use cases
    adapters/     configuration, HTTP endpoints, persistence and security
    shared/       request pipeline middlewares and helpers
"""

__version__ = "1.0.0"
