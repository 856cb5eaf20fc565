# authgate/adapters/__init__.py
