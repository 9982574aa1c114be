"""Assistant orchestrator.

Router -> engine -> coach, plus a guaranteed auto-trust focus action whenever
the message asks for focus. The router's own focus seed (confirm trust) and the
guaranteed action may both appear in one response.
"""

import re
from typing import Any, Literal

from loguru import logger
from pydantic import Field

from brain.actions.types import Action, ActionKind, StartFocusBlockPayload, WireModel, new_action
from brain.assistant.coach import CoachStep, coach_for_engine, coach_from_direct
from brain.assistant.memory import MemoryStore, MemoryWrite
from brain.assistant.router import DURATION_RE, RouteDecision, parse_duration_min, route_user_message
from brain.config.settings import settings
from brain.engines.generators import normalize_mode, run_engine
from brain.engines.types import EngineResponse

AUTO_FOCUS_MIN = 5
AUTO_FOCUS_MAX = 180
GOAL_MARKER_RE = re.compile(r"\bgoal\s*:\s*(.+)$", re.IGNORECASE | re.DOTALL)

FOCUS_PHRASES = ("pomodoro", "focus block", "start focus", "study for")

ENGINE_REPLIES = {
    "plan": "Plan ready. Starting focus.",
    "workout": "Workout ready. Let’s go.",
    "summary": "Summary ready.",
}


class AssistantRequest(WireModel):
    message: Any = ""
    mode: Any = None


class AssistantReply(WireModel):
    text: str
    tone: Literal["coach", "neutral"] | None = None


class ToolCallRecord(WireModel):
    tool: Literal["engine"] = "engine"
    engine: str
    mode: str
    goal: str
    output: EngineResponse


class AssistantDebug(WireModel):
    route: RouteDecision


class AssistantResponse(WireModel):
    assistant: AssistantReply
    tool_calls: list[ToolCallRecord] = Field(default_factory=list)
    actions: list[Action] = Field(default_factory=list)
    coach_steps: list[CoachStep] = Field(default_factory=list)
    memory_writes: list[MemoryWrite] = Field(default_factory=list)
    debug: AssistantDebug | None = None


def _safe_string(value: Any, fallback: str = "") -> str:
    return value if isinstance(value, str) else fallback


def derive_goal(message: str) -> str:
    """Text after an explicit "goal:" marker, else the whole trimmed message."""
    text = message.strip()
    if not text:
        return ""
    explicit = GOAL_MARKER_RE.search(text)
    if explicit and explicit.group(1).strip():
        return explicit.group(1).strip()
    return text


def has_explicit_goal(message: str) -> bool:
    explicit = GOAL_MARKER_RE.search(message.strip())
    return bool(explicit and explicit.group(1).strip())


def is_focus_intent(message: str, route: RouteDecision) -> bool:
    if "focus" in route.tags:
        return True

    text = message.lower()
    if any(phrase in text for phrase in FOCUS_PHRASES):
        return True
    return "focus" in text and DURATION_RE.search(text) is not None


def make_auto_focus_action(message: str) -> Action:
    """Focus block that runs without confirmation; duration clamped to [5, 180]."""
    duration_min = parse_duration_min(
        message,
        lower=AUTO_FOCUS_MIN,
        upper=AUTO_FOCUS_MAX,
    )
    return new_action(
        ActionKind.START_FOCUS_BLOCK,
        label=f"Start {duration_min}-min focus",
        payload=StartFocusBlockPayload(
            title="Focus Block",
            duration_min=duration_min,
            break_min=5 if duration_min >= 20 else 2,
            mode="pomodoro",
        ),
        trust="auto",
        priority="high",
        reason="You asked to focus. Executing immediately.",
        prefix="act_focus",
    )


async def run_assistant(request: AssistantRequest | dict[str, Any], *, memory: MemoryStore | None = None) -> AssistantResponse:
    """Turn one user message into assistant text, actions and coach steps.

    Args:
        request: Message and optional mode
        memory: Store that receives explicit goals (optional)

    Returns:
        AssistantResponse; never raises for any message or mode
    """
    if not isinstance(request, AssistantRequest):
        request = AssistantRequest.model_validate(request)

    message = _safe_string(request.message)
    mode = normalize_mode(_safe_string(request.mode, settings.default_mode) or settings.default_mode)

    route = route_user_message(message)
    logger.info("Assistant request routed", engine=route.engine, confidence=route.confidence, tags=route.tags)

    actions: list[Action] = []
    if is_focus_intent(message, route):
        actions.append(make_auto_focus_action(message))
    actions.extend(route.seed_actions)

    if route.engine == "none":
        coached = coach_from_direct(actions)
        return AssistantResponse(
            assistant=AssistantReply(
                text="Starting your focus block now." if actions else "Tell me what you want to do next.",
                tone="neutral",
            ),
            actions=coached.actions,
            coach_steps=coached.steps,
            debug=AssistantDebug(route=route),
        )

    engine = route.engine
    goal = derive_goal(message)
    output = run_engine(engine, mode, goal)
    tool_calls = [ToolCallRecord(engine=engine, mode=mode, goal=goal, output=output)]

    memory_writes: list[MemoryWrite] = []
    if has_explicit_goal(message):
        memory_writes.append(MemoryWrite(type="goal", key=f"{engine}.goal", value=goal))
        if memory is not None:
            try:
                await memory.bulk_upsert(memory_writes)
            except Exception:
                logger.exception("Memory write failed (non-fatal)")

    coached = coach_for_engine(engine, output)

    return AssistantResponse(
        assistant=AssistantReply(text=ENGINE_REPLIES[engine], tone="coach"),
        tool_calls=tool_calls,
        actions=[*actions, *coached.actions],
        coach_steps=coached.steps,
        memory_writes=memory_writes,
        debug=AssistantDebug(route=route),
    )
