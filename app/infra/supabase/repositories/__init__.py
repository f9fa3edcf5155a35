"""Repository factory and exports"""
from supabase import Client
from .users import UserRepository
from .workflows import WorkflowRepository
from .tasks import TaskRepository
from .invites import InviteRepository


class RepositoryFactory:
    """Factory for creating repository instances"""

    def __init__(self, client: Client):
        self._client = client
        self._users: UserRepository = None
        self._workflows: WorkflowRepository = None
        self._tasks: TaskRepository = None
        self._invites: InviteRepository = None

    @property
    def users(self) -> UserRepository:
        """Get user profile repository"""
        if self._users is None:
            self._users = UserRepository(self._client)
        return self._users

    @property
    def workflows(self) -> WorkflowRepository:
        """Get workflows repository"""
        if self._workflows is None:
            self._workflows = WorkflowRepository(self._client)
        return self._workflows

    @property
    def tasks(self) -> TaskRepository:
        """Get task repository"""
        if self._tasks is None:
            self._tasks = TaskRepository(self._client)
        return self._tasks

    @property
    def invites(self) -> InviteRepository:
        """Get invites repository"""
        if self._invites is None:
            self._invites = InviteRepository(self._client)
        return self._invites


__all__ = [
    'RepositoryFactory',
    'UserRepository',
    'WorkflowRepository',
    'TaskRepository',
    'InviteRepository',
]
