"""Tasks API endpoints"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_task_service
from app.features.tasks.domain import PIPELINE, STATUS_INFO, get_next_status
from app.features.tasks.schemas import (
    AddCommentRequest,
    CommentResponse,
    CreateTaskRequest,
    StatusInfo,
    StatusListResponse,
    TaskListResponse,
    TaskResponse,
)
from app.features.tasks.service import TaskService
from app.middleware.auth import get_current_user
from app.models.user import AuthUser

router = APIRouter(prefix="/api", tags=["tasks"])


@router.get("/statuses", response_model=StatusListResponse)
async def list_statuses():
    """Kanban columns in pipeline order"""
    return {
        "statuses": [
            StatusInfo(
                key=status,
                label=STATUS_INFO[status][0],
                description=STATUS_INFO[status][1],
                next=get_next_status(status),
            )
            for status in PIPELINE
        ]
    }


@router.get("/workflows/{workflow_id}/tasks", response_model=TaskListResponse)
async def list_tasks(
    workflow_id: str,
    user: AuthUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """List the tasks of a workflow in creation order"""
    tasks = await service.list_tasks(workflow_id)

    return {
        "tasks": tasks,
        "count": len(tasks)
    }


@router.post("/workflows/{workflow_id}/tasks", response_model=TaskResponse)
async def create_task(
    workflow_id: str,
    request: CreateTaskRequest,
    user: AuthUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Create a task in the "report" column (owner, project manager, developer)"""
    task = await service.create_task(
        workflow_id,
        user,
        title=request.title,
        description=request.description,
        assigned_to=request.assigned_to,
    )
    return {"task": task}


@router.get("/tasks/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    user: AuthUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    task = await service.get_task(task_id)
    return {"task": task}


@router.post("/tasks/{task_id}/advance", response_model=TaskResponse)
async def advance_task(
    task_id: str,
    user: AuthUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """
    Move a task one column to the right.

    Raises:
        403: caller may not edit tasks
        409: task is already done
    """
    task = await service.advance_task(task_id, user)
    return {"task": task}


@router.post("/tasks/{task_id}/comments", response_model=CommentResponse)
async def add_comment(
    task_id: str,
    request: AddCommentRequest,
    user: AuthUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Comment on a task; any signed-in user may comment"""
    comment = await service.add_comment(task_id, user, request.text)
    return {"comment": comment}
