# authgate/shared/utils/__init__.py
