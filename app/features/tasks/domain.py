"""Domain models and rules for tasks: status pipeline, history and comments"""

from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from app.core.exceptions import (
    PermissionDenied,
    TerminalState,
    Unauthenticated,
    ValidationError,
)
from app.features.workflows.domain import Role, can_create_or_advance_tasks
from app.models.user import AuthUser
from app.utils.datetime_helper import utc_now


class TaskStatus(str, Enum):
    """Kanban columns, in pipeline order"""
    REPORT = "report"
    IN_REFLEXION = "in_reflexion"
    IN_PROGRESS = "in_progress"
    DONE = "done"


PIPELINE: List[TaskStatus] = [
    TaskStatus.REPORT,
    TaskStatus.IN_REFLEXION,
    TaskStatus.IN_PROGRESS,
    TaskStatus.DONE,
]
INITIAL_STATUS = TaskStatus.REPORT

STATUS_INFO = {
    TaskStatus.REPORT: ("Rapport", "Initialisation"),
    TaskStatus.IN_REFLEXION: ("Réflexion", "Analyse"),
    TaskStatus.IN_PROGRESS: ("En cours", "Exécution"),
    TaskStatus.DONE: ("Terminé", "Complété"),
}

DEFAULT_USER_NAME = "Utilisateur"


class StatusEvent(BaseModel):
    status: TaskStatus
    timestamp: datetime


class Comment(BaseModel):
    uid: str
    user_name: str
    text: str
    timestamp: datetime


class TaskCreate(BaseModel):
    """Task creation model"""
    workflow_id: str
    title: str
    description: str = ""
    status: TaskStatus = INITIAL_STATUS
    assigned_to: str
    comments: List[Comment] = Field(default_factory=list)
    history: List[StatusEvent] = Field(default_factory=list)
    created_at: datetime


class Task(TaskCreate):
    """Complete task model from database"""
    id: str

    class Config:
        from_attributes = True


def get_next_status(current) -> Optional[TaskStatus]:
    """Immediate successor in the pipeline, None when terminal or unrecognized"""
    try:
        status = TaskStatus(current)
    except ValueError:
        return None

    index = PIPELINE.index(status)
    if index + 1 < len(PIPELINE):
        return PIPELINE[index + 1]
    return None


def new_task(
    workflow_id: str,
    title: str,
    creator: AuthUser,
    role: Role,
    description: Optional[str] = None,
    assigned_to: Optional[str] = None,
    now: Optional[datetime] = None,
) -> TaskCreate:
    """
    Build a task record in the initial pipeline state.

    Raises:
        PermissionDenied: role may not create tasks
        ValidationError: title is blank
    """
    if not can_create_or_advance_tasks(role):
        raise PermissionDenied()
    if not title or not title.strip():
        raise ValidationError("Le titre de la tâche est requis")

    created_at = now or utc_now()
    return TaskCreate(
        workflow_id=workflow_id,
        title=title.strip(),
        description=description or "",
        status=INITIAL_STATUS,
        assigned_to=assigned_to or creator.id,
        history=[StatusEvent(status=INITIAL_STATUS, timestamp=created_at)],
        created_at=created_at,
    )


def advance_status(task: Task, role: Role, now: Optional[datetime] = None) -> Task:
    """Move a task one step along the pipeline and record it in the history"""
    if not can_create_or_advance_tasks(role):
        raise PermissionDenied()

    successor = get_next_status(task.status)
    if successor is None:
        raise TerminalState()

    task.status = successor
    task.history.append(StatusEvent(status=successor, timestamp=now or utc_now()))
    return task


def add_comment(
    task: Task,
    author: Optional[AuthUser],
    text: Optional[str],
    now: Optional[datetime] = None,
) -> Comment:
    """Append a comment; any authenticated user may comment"""
    if not text or not text.strip():
        raise ValidationError("Le commentaire ne peut pas être vide")
    if author is None:
        raise Unauthenticated()

    comment = Comment(
        uid=author.id,
        user_name=author.display_name or author.email or DEFAULT_USER_NAME,
        text=text,
        timestamp=now or utc_now(),
    )
    task.comments.append(comment)
    return comment


def count_by_status(tasks: Iterable[Task]) -> Dict[str, int]:
    """Number of tasks in each kanban column"""
    counts = {status.value: 0 for status in PIPELINE}
    for task in tasks:
        counts[TaskStatus(task.status).value] += 1
    return counts
