from fastapi import APIRouter
from aha_api.api import auth, generate, users

api_router = APIRouter()

api_router.include_router(users.router)
api_router.include_router(auth.router)
api_router.include_router(generate.router)
