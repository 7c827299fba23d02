from fastapi import APIRouter

from src.api.routes import account, health, history, jobs, verify

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(verify.router, tags=["verify"])
api_router.include_router(jobs.router, tags=["jobs"])
api_router.include_router(history.router, tags=["history"])
api_router.include_router(account.router, tags=["account"])
