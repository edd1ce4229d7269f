from fastapi import APIRouter

from keywarden.api.data.router import entity_router, router as data_router
from keywarden.api.health.router import router as health_router, root_router
from keywarden.api.keys.router import router as keys_router
from keywarden.api.reach.router import router as reach_router

api_router = APIRouter()
api_router.include_router(root_router)
api_router.include_router(health_router)
api_router.include_router(keys_router)
api_router.include_router(reach_router)
api_router.include_router(data_router)
api_router.include_router(entity_router)
