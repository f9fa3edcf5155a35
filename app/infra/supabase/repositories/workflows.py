"""Workflow repository"""
from typing import List

from supabase import Client  # type: ignore

from app.features.workflows.domain import Member, Workflow, WorkflowCreate

from .base import BaseRepository


class WorkflowRepository(BaseRepository[Workflow, WorkflowCreate, Workflow]):
    """Repository for workflow operations (members are embedded in the record)"""

    def __init__(self, client: Client):
        super().__init__(client, "workflows", Workflow)

    async def find_all(self) -> List[Workflow]:
        """All workflows, oldest first"""
        return await self.find_by_filters({}, order_by="created_at")

    async def add_member(self, workflow_id: str, member: Member) -> Workflow:
        return await self.append_to_array(workflow_id, "members", member)

    async def save_members(self, workflow: Workflow) -> Workflow:
        """Write back the whole members array"""
        members = [m.model_dump(mode='json') for m in workflow.members]
        return await self.update(workflow.id, {"members": members})

    async def remove_member(self, workflow_id: str, uid: str) -> Workflow:
        return await self.remove_from_array(workflow_id, "members", lambda m: m.uid == uid)
