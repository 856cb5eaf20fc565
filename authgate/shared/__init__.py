# authgate/shared/__init__.py
