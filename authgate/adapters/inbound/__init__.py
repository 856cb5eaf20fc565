# authgate/adapters/inbound/__init__.py
