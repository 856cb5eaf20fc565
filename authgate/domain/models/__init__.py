# authgate/domain/models/__init__.py
