"""Business logic for the task board"""

import logging
from typing import List, Optional

from app.core.exceptions import NotFound
from app.features.tasks import domain
from app.features.tasks.domain import Comment, Task
from app.features.workflows.domain import Workflow, resolve_role
from app.infra.supabase.repositories import RepositoryFactory
from app.models.user import AuthUser

logger = logging.getLogger(__name__)


class TaskService:
    """Service layer for task creation, status transitions and comments"""

    def __init__(self, repos: RepositoryFactory):
        self.repos = repos

    async def _get_workflow(self, workflow_id: str) -> Workflow:
        workflow = await self.repos.workflows.find_by_id(workflow_id)
        if not workflow:
            raise NotFound()
        return workflow

    async def get_task(self, task_id: str) -> Task:
        task = await self.repos.tasks.find_by_id(task_id)
        if not task:
            logger.warning(f"Task not found: {task_id}")
            raise NotFound("Tâche introuvable")
        return task

    async def list_tasks(self, workflow_id: str) -> List[Task]:
        """Tasks of a workflow in creation order"""
        await self._get_workflow(workflow_id)
        return await self.repos.tasks.find_by_workflow(workflow_id)

    async def create_task(
        self,
        workflow_id: str,
        user: AuthUser,
        title: str,
        description: Optional[str] = None,
        assigned_to: Optional[str] = None,
    ) -> Task:
        """
        Create a task in the initial column.

        Raises:
            NotFound: workflow does not exist
            PermissionDenied: caller is a viewer or outsider
            ValidationError: blank title
        """
        workflow = await self._get_workflow(workflow_id)
        role = resolve_role(workflow, user.id)

        record = domain.new_task(workflow_id, title, user, role, description, assigned_to)
        task = await self.repos.tasks.create(record)

        logger.info(f"Created task {task.id} in workflow {workflow_id}")
        return task

    async def advance_task(self, task_id: str, user: AuthUser) -> Task:
        """Move a task to the next column and persist the history entry"""
        task = await self.get_task(task_id)
        workflow = await self._get_workflow(task.workflow_id)
        role = resolve_role(workflow, user.id)

        domain.advance_status(task, role)
        saved = await self.repos.tasks.save_status(task)

        logger.info(f"Task {task_id} moved to {task.status.value} by {user.id}")
        return saved or task

    async def add_comment(self, task_id: str, user: Optional[AuthUser], text: Optional[str]) -> Comment:
        task = await self.get_task(task_id)

        comment = domain.add_comment(task, user, text)
        await self.repos.tasks.add_comment(task_id, comment)

        logger.info(f"Comment added to task {task_id} by {comment.uid}")
        return comment
