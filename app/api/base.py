from fastapi import APIRouter
from app.api import health
from app.features.auth.api import router as auth_router
from app.features.tasks.api import router as tasks_router
from app.features.workflows.api import router as workflows_router

api_router = APIRouter()

# Include all sub-routers
api_router.include_router(health.router)
api_router.include_router(auth_router)
api_router.include_router(workflows_router)
api_router.include_router(tasks_router)
