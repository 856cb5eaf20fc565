# authgate/application/ports/__init__.py
