# authgate/domain/__init__.py
