# authgate/adapters/outbound/security/__init__.py
