from fastapi import APIRouter

from bruce.ai.router import router as ai_router
from bruce.auth.router import router as auth_router
from bruce.memory.router import router as memory_router
from bruce.stubs.router import router as stubs_router

api_router = APIRouter()
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(memory_router, prefix="/memory", tags=["memory"])
api_router.include_router(ai_router, tags=["ai"])
api_router.include_router(stubs_router, tags=["commands"])
