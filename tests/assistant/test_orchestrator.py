"""Assistant orchestration: router -> engine -> coach, plus the guaranteed focus action."""

from unittest.mock import AsyncMock

import pytest

from brain.assistant.memory import InMemoryMemoryStore, MemoryQuery
from brain.assistant.orchestrator import (
    AssistantRequest,
    derive_goal,
    has_explicit_goal,
    make_auto_focus_action,
    run_assistant,
)


def _focus_actions(response, trust):
    return [a for a in response.actions if a.kind == "start_focus_block" and a.trust == trust]


@pytest.mark.asyncio
async def test_pomodoro_gets_auto_action_and_confirm_seed():
    response = await run_assistant(AssistantRequest(message="pomodoro 50 min"))

    auto = _focus_actions(response, "auto")
    confirm = _focus_actions(response, "confirm")
    assert len(auto) == 1
    assert len(confirm) == 1
    assert auto[0].payload.duration_min == 50
    assert auto[0].payload.break_min == 5
    assert auto[0].id.startswith("act_focus_")
    assert [a.id for a in response.actions] == [auto[0].id, confirm[0].id]
    assert response.assistant.text == "Starting your focus block now."
    assert response.assistant.tone == "neutral"
    assert response.tool_calls == []


@pytest.mark.asyncio
async def test_auto_focus_clamped_while_seed_keeps_request():
    response = await run_assistant(AssistantRequest(message="focus for 500 minutes"))

    assert _focus_actions(response, "auto")[0].payload.duration_min == 180
    assert _focus_actions(response, "confirm")[0].payload.duration_min == 500


def test_auto_focus_short_block_gets_short_break():
    action = make_auto_focus_action("focus 10 min")

    assert action.payload.duration_min == 10
    assert action.payload.break_min == 2
    assert action.trust == "auto"


def test_auto_focus_minimum_is_five():
    assert make_auto_focus_action("focus 1 min").payload.duration_min == 5


@pytest.mark.asyncio
async def test_engine_path_records_one_tool_call():
    response = await run_assistant(AssistantRequest(message="plan my revision week", mode="freelancer"))

    assert len(response.tool_calls) == 1
    call = response.tool_calls[0]
    assert call.tool == "engine"
    assert call.engine == "plan"
    assert call.mode == "freelancer"
    assert call.goal == "plan my revision week"
    assert call.output.engine == "plan"
    assert response.assistant.text == "Plan ready. Starting focus."
    assert response.assistant.tone == "coach"
    assert response.coach_steps[0].priority == "now"
    assert response.debug.route.engine == "plan"


@pytest.mark.asyncio
async def test_focus_and_plan_keeps_auto_then_seed_then_coach_order():
    response = await run_assistant(AssistantRequest(message="study for 45 minutes"))

    assert [(a.kind, a.trust) for a in response.actions] == [
        ("start_focus_block", "auto"),
        ("start_focus_block", "confirm"),
        ("start_focus_block", "confirm"),
    ]
    assert response.actions[0].payload.duration_min == 45
    assert response.actions[1].payload.duration_min == 45
    assert response.actions[2].payload.title == "Plan Execution"


@pytest.mark.asyncio
async def test_workout_reply():
    response = await run_assistant({"message": "gym time", "mode": "creator"})

    assert response.tool_calls[0].engine == "workout"
    assert response.tool_calls[0].output.items[0] == "5 min warm-up (mobility + light cardio)"
    assert response.assistant.text == "Workout ready. Let’s go."
    assert response.actions[-1].kind == "log_workout"


@pytest.mark.asyncio
async def test_summary_reply_opens_planner():
    response = await run_assistant(AssistantRequest(message="recap please"))

    assert response.assistant.text == "Summary ready."
    assert [a.kind for a in response.actions] == ["open_view"]


@pytest.mark.asyncio
async def test_fallback_asks_what_to_do():
    response = await run_assistant(AssistantRequest(message="hello there"))

    assert response.actions == []
    assert response.assistant.text == "Tell me what you want to do next."
    assert response.coach_steps[0].title == "Clarify what you want to do"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"message": None}, {"message": 12, "mode": 3}, {"message": ["x"]}])
async def test_malformed_request_never_raises(payload):
    response = await run_assistant(payload)

    assert response.assistant.text
    assert response.actions == []


@pytest.mark.asyncio
async def test_invalid_mode_falls_back_to_student():
    response = await run_assistant(AssistantRequest(message="plan my day", mode="pirate"))

    assert response.tool_calls[0].output.mode == "student"


@pytest.mark.asyncio
async def test_explicit_goal_is_written_to_memory():
    store = InMemoryMemoryStore("orchestrator")

    response = await run_assistant(AssistantRequest(message="make a plan. Goal: pass the bar exam"), memory=store)

    assert response.tool_calls[0].goal == "pass the bar exam"
    assert len(response.memory_writes) == 1
    write = response.memory_writes[0]
    assert (write.type, write.key, write.value) == ("goal", "plan.goal", "pass the bar exam")
    stored = await store.get_relevant(MemoryQuery(keys=["plan.goal"]))
    assert stored[0].value == "pass the bar exam"


@pytest.mark.asyncio
async def test_memory_failure_is_not_fatal():
    store = AsyncMock()
    store.bulk_upsert.side_effect = RuntimeError("db down")

    response = await run_assistant(AssistantRequest(message="plan. goal: ship v1"), memory=store)

    assert response.assistant.text == "Plan ready. Starting focus."
    assert len(response.memory_writes) == 1


@pytest.mark.asyncio
async def test_no_memory_write_without_marker():
    response = await run_assistant(AssistantRequest(message="plan my day"))

    assert response.memory_writes == []


def test_goal_derivation():
    assert derive_goal("  ") == ""
    assert derive_goal(" finish thesis ") == "finish thesis"
    assert derive_goal("plan it GOAL: finish thesis") == "finish thesis"
    assert derive_goal("goal:   ") == "goal:"
    assert has_explicit_goal("goal: x") is True
    assert has_explicit_goal("goal:") is False


@pytest.mark.asyncio
async def test_four_digit_focus_duration_clamps_auto_and_keeps_seed():
    response = await run_assistant(AssistantRequest(message="focus 1000 minutes"))

    assert [(a.trust, a.payload.duration_min) for a in response.actions] == [("auto", 180), ("confirm", 1000)]


@pytest.mark.asyncio
@pytest.mark.parametrize("message", ["pomodoro 45 mins", "pomodoro 45 minute"])
async def test_auto_and_seed_read_the_same_duration(message):
    response = await run_assistant(AssistantRequest(message=message))

    assert [(a.trust, a.payload.duration_min) for a in response.actions] == [("auto", 45), ("confirm", 45)]


@pytest.mark.asyncio
async def test_tool_call_records_normalized_mode():
    response = await run_assistant(AssistantRequest(message="plan my day", mode="banana"))

    call = response.tool_calls[0]
    assert call.mode == "student"
    assert call.mode == call.output.mode
