# authgate/adapters/outbound/__init__.py
