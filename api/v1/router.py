# api/v1/router.py
from fastapi import APIRouter

from . import auth

api_router = APIRouter()

api_router.include_router(auth.router, tags=["Auth"])
