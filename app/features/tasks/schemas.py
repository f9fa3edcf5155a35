"""Request and response schemas for the Tasks API"""

from typing import List, Optional

from pydantic import BaseModel

from app.features.tasks.domain import Comment, Task, TaskStatus


class CreateTaskRequest(BaseModel):
    title: str
    description: Optional[str] = None
    assigned_to: Optional[str] = None


class AddCommentRequest(BaseModel):
    text: str


class TaskResponse(BaseModel):
    task: Task


class TaskListResponse(BaseModel):
    tasks: List[Task]
    count: int


class CommentResponse(BaseModel):
    comment: Comment


class StatusInfo(BaseModel):
    """Kanban column with its label and the column a task moves to next"""
    key: TaskStatus
    label: str
    description: str
    next: Optional[TaskStatus] = None


class StatusListResponse(BaseModel):
    statuses: List[StatusInfo]
