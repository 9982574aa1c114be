"""Consumer contract: one execution in flight, each action id at most once."""

import asyncio

import pytest

from brain.actions.dispatch import ActionDispatcher
from brain.actions.registry import ActionExecutor, ExecutorRegistry
from brain.actions.types import (
    ActionKind,
    ActionResult,
    SendEmailAction,
    SendEmailPayload,
    StartFocusBlockAction,
    StartFocusBlockPayload,
)


class SlowFocusExecutor(ActionExecutor):
    """Tracks how many executions overlap."""

    kind = ActionKind.START_FOCUS_BLOCK

    def __init__(self):
        self.active = 0
        self.max_active = 0
        self.seen: list[str] = []

    async def execute(self, action, context):
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        await asyncio.sleep(0.01)
        self.seen.append(action.id)
        self.active -= 1
        return ActionResult.success(action, "ok")


def _focus(action_id: str, trust=None) -> StartFocusBlockAction:
    return StartFocusBlockAction(
        id=action_id,
        label="Focus",
        trust=trust,
        payload=StartFocusBlockPayload(title="Focus Block", duration_min=25),
    )


@pytest.fixture
def slow_executor() -> SlowFocusExecutor:
    return SlowFocusExecutor()


@pytest.fixture
def dispatcher(slow_executor) -> ActionDispatcher:
    reg = ExecutorRegistry(name="dispatch")
    reg.register(slow_executor)
    return ActionDispatcher(registry=reg, session_id="test")


@pytest.mark.asyncio
async def test_same_id_dispatched_once(dispatcher, slow_executor):
    first = await dispatcher.dispatch(_focus("a1"))
    second = await dispatcher.dispatch(_focus("a1"))

    assert first.ok is True
    assert second is None
    assert slow_executor.seen == ["a1"]
    assert dispatcher.has_dispatched("a1")


@pytest.mark.asyncio
async def test_concurrent_duplicates_run_once(dispatcher, slow_executor):
    results = await asyncio.gather(*(dispatcher.dispatch(_focus("dup")) for _ in range(5)))

    assert sum(result is not None for result in results) == 1
    assert slow_executor.seen == ["dup"]


@pytest.mark.asyncio
async def test_one_execution_in_flight(dispatcher, slow_executor):
    await asyncio.gather(*(dispatcher.dispatch(_focus(f"a{i}")) for i in range(4)))

    assert slow_executor.max_active == 1
    assert sorted(slow_executor.seen) == ["a0", "a1", "a2", "a3"]
    assert dispatcher.busy is False


@pytest.mark.asyncio
async def test_auto_run_skips_actions_needing_confirmation(dispatcher, slow_executor):
    email = SendEmailAction(
        id="mail",
        label="Send",
        payload=SendEmailPayload(to=["a@example.com"], subject="s", body_text="b"),
    )
    actions = [_focus("auto1", trust="auto"), _focus("confirm1", trust="confirm"), email, _focus("allow1")]

    results = await dispatcher.auto_run(actions)

    assert [result.action_id for result in results] == ["auto1", "allow1"]
    assert slow_executor.seen == ["auto1", "allow1"]
    assert not dispatcher.has_dispatched("confirm1")
    assert not dispatcher.has_dispatched("mail")


@pytest.mark.asyncio
async def test_auto_run_twice_does_not_repeat(dispatcher, slow_executor):
    actions = [_focus("auto1", trust="auto")]

    await dispatcher.auto_run(actions)
    again = await dispatcher.auto_run(actions)

    assert again == []
    assert slow_executor.seen == ["auto1"]


@pytest.mark.asyncio
async def test_reset_forgets_ids(dispatcher, slow_executor):
    await dispatcher.dispatch(_focus("a1"))
    dispatcher.reset()

    result = await dispatcher.dispatch(_focus("a1"))

    assert result is not None
    assert slow_executor.seen == ["a1", "a1"]
