# authgate/domain/services/__init__.py
