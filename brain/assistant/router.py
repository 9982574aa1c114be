"""Deterministic intent routing.

Decides which engine to call and which native actions to suggest, without any
model dependency. Rules are an ordered list evaluated first-match-wins; the
focus rule sits before summary/workout/plan so focus requests are never
swallowed by those.
"""

import re
from collections.abc import Callable
from typing import Literal

from pydantic import Field

from brain.actions.types import Action, ActionKind, StartFocusBlockPayload, WireModel, new_action

RouteEngine = Literal["plan", "workout", "summary", "none"]
Confidence = Literal["low", "medium", "high"]

EMPTY_NUDGE = "Say something and I’ll do something. Preferably in that order."
FALLBACK_NUDGE = (
    "I can plan, coach workouts, or summarize your progress. "
    "Tell me what you want done, not what you want *discussed*."
)

DEFAULT_FOCUS_MIN = 25

FOCUS_RE = re.compile(r"\b(focus|pomodoro|lock\s*in|deep\s*work|start\s*(a\s*)?timer|study\s*block|study\s+for)\b")
SUMMARY_RE = re.compile(r"\b(summar(y|ise|ize)|recap|what\s+did\s+i\s+do|my\s+progress|overview|log)\b")
WORKOUT_RE = re.compile(
    r"\b(work\s*out|workout|gym|train(ing)?|lift|sets?|reps?|rpe|hypertrophy|strength|cardio|cut|bulk"
    r"|bench|squats?|deadlifts?|\d+\s*x\s*\d+)\b"
)
PLAN_RE = re.compile(
    r"\b(plan|schedule|calendar|checklist|to-?do|tasks?|roadmap|strategy|study|revision|deadline|project)\b"
)
# Planning words that, next to a focus request, mean the user also wants a plan
FOCUS_PLAN_RE = re.compile(
    r"\b(plan|schedule|calendar|checklist|to-?do|tasks?|roadmap|strategy|study|revision|deadline|project"
    r"|today|tomorrow)\b"
)
DURATION_RE = re.compile(r"\b(\d+)\s*(min|mins|minute|minutes)\b", re.IGNORECASE)


class RouteDecision(WireModel):
    engine: RouteEngine
    confidence: Confidence
    direct_text: str | None = None
    tags: list[str] = Field(default_factory=list)
    seed_actions: list[Action] = Field(default_factory=list)


def normalize_message(message: str | None) -> str:
    return (message if isinstance(message, str) else "").strip().lower()


def parse_duration_min(
    text: str,
    *,
    default: int = DEFAULT_FOCUS_MIN,
    lower: int = 1,
    upper: int | None = None,
    pattern: re.Pattern[str] = DURATION_RE,
) -> int:
    """Read "<N> min(s)/minute(s)" from ``text``.

    Args:
        text: Message to search
        default: Value when no duration is present or it is not positive
        lower: Smallest allowed value
        upper: Largest allowed value, None for no upper bound

    Returns:
        Duration in minutes within [lower, upper]
    """
    match = pattern.search(text)
    value = int(match.group(1)) if match else default
    if value <= 0:
        value = default
    value = max(lower, value)
    if upper is not None:
        value = min(upper, value)
    return value


def _focus_seed(text: str) -> Action:
    duration_min = parse_duration_min(text)
    return new_action(
        ActionKind.START_FOCUS_BLOCK,
        label=f"Start {duration_min}-min focus",
        payload=StartFocusBlockPayload(title="Focus Block", duration_min=duration_min, break_min=5, mode="pomodoro"),
        trust="confirm",
        priority="high",
        reason="You asked to focus. I am nothing if not obedient.",
    )


def _empty(_text: str) -> RouteDecision:
    return RouteDecision(engine="none", confidence="high", direct_text=EMPTY_NUDGE)


def _focus(text: str) -> RouteDecision:
    return RouteDecision(
        engine="plan" if FOCUS_PLAN_RE.search(text) else "none",
        confidence="high",
        tags=["focus"],
        seed_actions=[_focus_seed(text)],
    )


def _engine(engine: RouteEngine) -> Callable[[str], RouteDecision]:
    def decide(_text: str) -> RouteDecision:
        return RouteDecision(engine=engine, confidence="high", tags=[engine])

    return decide


def _fallback(_text: str) -> RouteDecision:
    return RouteDecision(engine="none", confidence="medium", direct_text=FALLBACK_NUDGE, tags=["fallback"])


Rule = tuple[str, Callable[[str], bool], Callable[[str], RouteDecision]]

ROUTE_RULES: list[Rule] = [
    ("empty", lambda text: not text, _empty),
    ("focus", lambda text: bool(FOCUS_RE.search(text)), _focus),
    ("summary", lambda text: bool(SUMMARY_RE.search(text)), _engine("summary")),
    ("workout", lambda text: bool(WORKOUT_RE.search(text)), _engine("workout")),
    ("plan", lambda text: bool(PLAN_RE.search(text)), _engine("plan")),
    ("fallback", lambda _text: True, _fallback),
]


def route_user_message(message: str | None) -> RouteDecision:
    """Classify a message into an engine, confidence, tags and seed actions."""
    text = normalize_message(message)
    for _name, matches, decide in ROUTE_RULES:
        if matches(text):
            return decide(text)
    return _fallback(text)
