"""Engine contracts: modes, engine names and the response every engine returns."""

from typing import Any, Literal

from brain.actions.types import Action, WireModel

Mode = Literal["student", "freelancer", "creator"]
EngineName = Literal["plan", "workout", "summary"]
Priority = Literal["low", "medium", "high"]

MODES: tuple[str, ...] = ("student", "freelancer", "creator")
ENGINE_NAMES: tuple[str, ...] = ("plan", "workout", "summary")


class EngineCoachStep(WireModel):
    id: str  # stable across calls for the same engine
    title: str
    duration_mins: int | None = None
    why: str | None = None
    success_check: str | None = None
    next_if_stuck: str | None = None
    checklist: list[str] | None = None


class CoachBlock(WireModel):
    goal: str
    priority: Priority
    steps: list[EngineCoachStep]


class EngineResponse(WireModel):
    ok: bool
    engine: EngineName
    mode: Mode
    goal: str

    # Primary list a UI can always render
    items: list[str]

    coach: CoachBlock | None = None
    actions: list[Action] | None = None

    raw: Any = None
    error: str | None = None


def is_engine_name(value: Any) -> bool:
    return isinstance(value, str) and value in ENGINE_NAMES


def is_mode(value: Any) -> bool:
    return isinstance(value, str) and value in MODES


def primary_list(response: EngineResponse) -> list[str]:
    """The default list to show for an engine response."""
    return list(response.items or [])
