"""Invite repository"""
from typing import List, Optional

from supabase import Client  # type: ignore

from app.features.workflows.domain import Invite, InviteCreate

from .base import BaseRepository


class InviteRepository(BaseRepository[Invite, InviteCreate, Invite]):
    """Repository for pending invitations, keyed by token"""

    def __init__(self, client: Client):
        super().__init__(client, "invites", Invite, id_column="token")

    async def find_by_token(self, token: str) -> Optional[Invite]:
        return await self.find_by_id(token)

    async def find_by_workflow(self, workflow_id: str) -> List[Invite]:
        """Pending invitations of a workflow, newest first"""
        return await self.find_by_filters({"workflow_id": workflow_id}, order_by="created_at", desc=True)
