# authgate/adapters/configuration/__init__.py
