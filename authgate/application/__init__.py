# authgate/application/__init__.py
