"""FastAPI dependencies wiring services to their collaborators"""
from fastapi import Depends

from app import config
from app.features.auth.service import AuthService
from app.features.tasks.service import TaskService
from app.features.workflows.service import WorkflowService
from app.infra.supabase.client import create_auth_client, get_supabase_client
from app.infra.supabase.identity import SupabaseIdentity
from app.infra.supabase.repositories import RepositoryFactory
from app.services.mail_service import MailService


def get_repositories() -> RepositoryFactory:
    return RepositoryFactory(get_supabase_client())


def get_mail_service() -> MailService:
    return MailService()


def get_identity() -> SupabaseIdentity:
    return SupabaseIdentity(create_auth_client, admin_client_factory=get_supabase_client)


def get_workflow_service(
    repos: RepositoryFactory = Depends(get_repositories),
    mail: MailService = Depends(get_mail_service),
) -> WorkflowService:
    return WorkflowService(repos, mail, config.APP_ORIGIN)


def get_task_service(repos: RepositoryFactory = Depends(get_repositories)) -> TaskService:
    return TaskService(repos)


def get_auth_service(
    identity: SupabaseIdentity = Depends(get_identity),
    repos: RepositoryFactory = Depends(get_repositories),
    workflows: WorkflowService = Depends(get_workflow_service),
) -> AuthService:
    return AuthService(identity, repos, workflows)
