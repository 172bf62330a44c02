from fastapi import APIRouter

from react_gateway.platform.server.routes.base import base_router

root = APIRouter()
root.include_router(base_router)
