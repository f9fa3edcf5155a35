import logging

from app import config

# Log configuration (before other imports)
# ruff: noqa: E402
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    force=True
)

from fastapi import FastAPI, Request  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402
from app.api.base import api_router  # noqa: E402
from app.core.exceptions import UnknownFailure, WorkflowManagerError  # noqa: E402

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Workflow Manager API",
    description="Backend API for Workflow Manager - shared kanban boards with role-based membership",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def workflow_error_handler(request: Request, exc: WorkflowManagerError) -> JSONResponse:
    """Render application errors as their localized message and stable code"""
    if exc.status_code >= 500:
        log = logger.error
    elif exc.status_code in (401, 403):
        log = logger.warning
    else:
        log = logger.info
    log(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures with their traceback and answer with the generic message"""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)

    error = UnknownFailure()
    return JSONResponse(
        status_code=error.status_code,
        content={"detail": error.detail, "code": error.code},
    )


app.add_exception_handler(WorkflowManagerError, workflow_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

# Include all API routes
app.include_router(api_router)


@app.get("/")
def read_root():
    return {
        "message": "Workflow Manager API",
        "docs": "/docs",
        "version": "1.0.0"
    }
