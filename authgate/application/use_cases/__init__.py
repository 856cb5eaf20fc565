# authgate/application/use_cases/__init__.py
