"""Health check and monitoring endpoints"""

import logging

from fastapi import APIRouter, Depends

from app.api.dependencies import get_repositories
from app.core.exceptions import WorkflowManagerError
from app.infra.supabase.repositories import RepositoryFactory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/store")
async def get_store_health(repos: RepositoryFactory = Depends(get_repositories)):
    """
    Check that the document store answers.

    Runs a single-row read against the workflows table.
    """
    try:
        await repos.workflows.find_by_filters({}, limit=1)
    except WorkflowManagerError as e:
        logger.warning(f"Store health check failed: {e}")
        return {"status": "unavailable", "error": str(e)}

    return {"status": "healthy"}


@router.get("/")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": "workflow-manager",
    }
