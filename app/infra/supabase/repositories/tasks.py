"""Task repository"""
from typing import List

from supabase import Client  # type: ignore

from app.features.tasks.domain import Comment, Task, TaskCreate

from .base import BaseRepository


class TaskRepository(BaseRepository[Task, TaskCreate, Task]):
    """Repository for task operations"""

    def __init__(self, client: Client):
        super().__init__(client, "tasks", Task)

    async def find_by_workflow(self, workflow_id: str) -> List[Task]:
        """Tasks of a workflow, in creation order"""
        return await self.find_by_filters({"workflow_id": workflow_id}, order_by="created_at")

    async def save_status(self, task: Task) -> Task:
        """Persist a status transition together with its history entry"""
        return await self.update(task.id, {
            "status": task.status.value,
            "history": [event.model_dump(mode='json') for event in task.history],
        })

    async def add_comment(self, task_id: str, comment: Comment) -> Task:
        return await self.append_to_array(task_id, "comments", comment)
