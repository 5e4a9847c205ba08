from fastapi import APIRouter

from guardquote.api.routes import health, auth, quotes

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])  # GET /
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])  # POST /login, /register, GET /me
api_router.include_router(quotes.router, prefix="/quotes", tags=["quotes"])  # owner-scoped CRUD
