# authgate/adapters/inbound/api/v1/endpoints/__init__.py
