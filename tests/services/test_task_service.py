"""Tests for TaskService."""

import pytest

from app.core.exceptions import NotFound, PermissionDenied, TerminalState, ValidationError
from app.features.tasks.domain import TaskStatus

pytestmark = pytest.mark.unit


async def test_create_task_is_persisted(task_service, board, supabase, developer):
    task = await task_service.create_task("wf-1", developer, "Maquettes", description="v1")

    assert task.id
    row = supabase.rows("tasks")[0]
    assert row["status"] == "report"
    assert row["assigned_to"] == developer.id
    assert row["history"][0]["status"] == "report"


@pytest.mark.parametrize("caller", ["viewer", "outsider"])
async def test_create_task_requires_editor(task_service, board, supabase, request, caller):
    user = request.getfixturevalue(caller)

    with pytest.raises(PermissionDenied):
        await task_service.create_task("wf-1", user, "Maquettes")
    assert supabase.rows("tasks") == []


async def test_create_task_in_missing_workflow(task_service, owner):
    with pytest.raises(NotFound):
        await task_service.create_task("nope", owner, "Maquettes")


async def test_list_tasks_in_creation_order(task_service, board, owner, manager):
    await task_service.create_task("wf-1", owner, "First")
    await task_service.create_task("wf-1", manager, "Second")

    tasks = await task_service.list_tasks("wf-1")

    assert [t.title for t in tasks] == ["First", "Second"]


async def test_advance_task_persists_history(task_service, board, supabase, developer, manager):
    task = await task_service.create_task("wf-1", developer, "Maquettes")

    advanced = await task_service.advance_task(task.id, manager)

    assert advanced.status == TaskStatus.IN_REFLEXION
    row = supabase.rows("tasks")[0]
    assert row["status"] == "in_reflexion"
    assert [e["status"] for e in row["history"]] == ["report", "in_reflexion"]


async def test_advance_done_task(task_service, board, owner):
    task = await task_service.create_task("wf-1", owner, "Maquettes")
    for _ in range(3):
        await task_service.advance_task(task.id, owner)

    with pytest.raises(TerminalState):
        await task_service.advance_task(task.id, owner)

    stored = await task_service.get_task(task.id)
    assert stored.status == TaskStatus.DONE
    assert len(stored.history) == 4


async def test_viewer_cannot_advance(task_service, board, supabase, owner, viewer):
    task = await task_service.create_task("wf-1", owner, "Maquettes")

    with pytest.raises(PermissionDenied):
        await task_service.advance_task(task.id, viewer)
    assert supabase.rows("tasks")[0]["status"] == "report"


async def test_anyone_signed_in_can_comment(task_service, board, supabase, owner, outsider):
    task = await task_service.create_task("wf-1", owner, "Maquettes")

    comment = await task_service.add_comment(task.id, outsider, "Super")

    assert comment.user_name == "Bob"
    assert supabase.rows("tasks")[0]["comments"][0]["text"] == "Super"


async def test_blank_comment_is_not_stored(task_service, board, supabase, owner):
    task = await task_service.create_task("wf-1", owner, "Maquettes")

    with pytest.raises(ValidationError):
        await task_service.add_comment(task.id, owner, "  ")
    assert supabase.rows("tasks")[0]["comments"] == []


async def test_get_missing_task(task_service, board):
    with pytest.raises(NotFound):
        await task_service.get_task("t-missing")
