# authgate/adapters/outbound/persistence/repositories/__init__.py (async version)

from authgate.adapters.outbound.persistence.repositories.user_repository import AsyncUserRepository

__all__ = [
    "AsyncUserRepository",
]
