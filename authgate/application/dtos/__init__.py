# authgate/application/dtos/__init__.py
