from fastapi import APIRouter

from linkdb.api.v1 import actresses, links, metadata, users

api_router = APIRouter(prefix="/api")
api_router.include_router(links.router)
api_router.include_router(actresses.router)
api_router.include_router(metadata.router)
api_router.include_router(users.router)

__all__ = ["api_router"]
