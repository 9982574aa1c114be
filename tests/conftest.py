"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

import pytest

from brain.actions.executors.internal import register_internal_executors
from brain.actions.registry import ExecutorRegistry
from brain.actions.types import (
    ChecklistItem,
    CreateChecklistAction,
    CreateChecklistPayload,
    OpenViewAction,
    OpenViewPayload,
    StartFocusBlockAction,
    StartFocusBlockPayload,
)


@pytest.fixture
def registry() -> ExecutorRegistry:
    """Isolated registry with the first-party executors registered."""
    reg = ExecutorRegistry(name="test")
    register_internal_executors(reg)
    reg.seal()
    return reg


@pytest.fixture
def empty_registry() -> ExecutorRegistry:
    return ExecutorRegistry(name="empty")


@pytest.fixture
def focus_action() -> StartFocusBlockAction:
    return StartFocusBlockAction(
        id="act_focus_test",
        label="Start 25-min focus",
        payload=StartFocusBlockPayload(title="Focus Block", duration_min=25, break_min=5, mode="pomodoro"),
    )


@pytest.fixture
def checklist_action() -> CreateChecklistAction:
    return CreateChecklistAction(
        id="act_checklist_test",
        label="Create checklist",
        payload=CreateChecklistPayload(
            title="Exam prep",
            items=[ChecklistItem(text="Past paper"), ChecklistItem(text="Flashcards", done=True, estimate_min=15)],
        ),
    )


@pytest.fixture
def open_view_action() -> OpenViewAction:
    return OpenViewAction(id="act_view_test", label="Open planner", payload=OpenViewPayload(view="plan"))
