# authgate/adapters/inbound/api/v1/router.py

from fastapi import APIRouter
from authgate.adapters.inbound.api.v1.endpoints import auth_endpoint

api_router = APIRouter()

# Include the endpoint routers
api_router.include_router(auth_endpoint.router, prefix="/auth", tags=["Auth"])
