"""Coach layer: turns engine output or seed actions into next steps.

Each coach function returns prioritized steps with a success check and the
actions that carry those steps out. Engine output may be an ``EngineResponse``
or a plain mapping.
"""

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import Field

from brain.actions.types import (
    Action,
    ActionKind,
    LogWorkoutPayload,
    OpenViewPayload,
    StartFocusBlockPayload,
    WireModel,
    new_action,
)

CoachPriority = Literal["now", "next", "later"]

DEFAULT_WORKOUT_TITLE = "Workout Session"
DEFAULT_WORKOUT_MIN = 45
PLAN_FOCUS_MIN = 25


class CoachStep(WireModel):
    priority: CoachPriority
    title: str
    duration_min: int | None = None
    success_check: str


class CoachOutput(WireModel):
    steps: list[CoachStep] = Field(default_factory=list)
    actions: list[Action] = Field(default_factory=list)


def _field(output: Any, *names: str) -> Any:
    """First non-None value among ``names``, read as attribute or key."""
    if output is None:
        return None
    for name in names:
        if isinstance(output, Mapping):
            value = output.get(name)
        else:
            value = getattr(output, name, None)
        if value is not None:
            return value
    return None


def coach_from_plan(output: Any) -> CoachOutput:
    tasks = _field(output, "tasks", "items", "checklist")

    if isinstance(tasks, list | tuple) and len(tasks) > 0:
        return CoachOutput(
            steps=[
                CoachStep(
                    priority="now",
                    title="Start executing the plan",
                    duration_min=PLAN_FOCUS_MIN,
                    success_check="Complete at least one planned task",
                )
            ],
            actions=[
                new_action(
                    ActionKind.START_FOCUS_BLOCK,
                    label=f"Start {PLAN_FOCUS_MIN}-min focus block",
                    payload=StartFocusBlockPayload(
                        title="Plan Execution", duration_min=PLAN_FOCUS_MIN, break_min=5, mode="pomodoro"
                    ),
                    trust="confirm",
                    priority="high",
                    reason="Execution beats planning. Always.",
                )
            ],
        )

    return CoachOutput(
        steps=[
            CoachStep(
                priority="next",
                title="Refine or clarify your plan",
                success_check="Plan has concrete next steps",
            )
        ]
    )


def coach_from_workout(output: Any) -> CoachOutput:
    title = _field(output, "title", "name") or DEFAULT_WORKOUT_TITLE
    duration_min = _field(output, "duration_min", "durationMin")

    return CoachOutput(
        steps=[
            CoachStep(
                priority="now",
                title=f"Do the workout: {title}",
                duration_min=duration_min if duration_min is not None else DEFAULT_WORKOUT_MIN,
                success_check="Complete at least 70% of prescribed work",
            )
        ],
        actions=[
            new_action(
                ActionKind.LOG_WORKOUT,
                label="Log workout after completion",
                payload=LogWorkoutPayload(title=str(title), duration_min=duration_min, notes=_field(output, "notes")),
                trust="confirm",
                priority="normal",
                reason="Logging improves future recommendations.",
            )
        ],
    )


def coach_from_summary(output: Any) -> CoachOutput:
    return CoachOutput(
        steps=[
            CoachStep(
                priority="next",
                title="Review your progress",
                success_check="You understand what worked and what didn’t",
            )
        ],
        actions=[
            new_action(
                ActionKind.OPEN_VIEW,
                label="Open planner",
                payload=OpenViewPayload(view="plan"),
                trust="auto",
                priority="low",
            )
        ],
    )


def coach_from_direct(seed_actions: list[Action] | None = None) -> CoachOutput:
    """Coach the no-engine path. Seed actions pass through unchanged."""
    actions = list(seed_actions or [])

    if actions:
        step = CoachStep(
            priority="now",
            title="Take the suggested action",
            success_check="Action executed successfully",
        )
    else:
        step = CoachStep(
            priority="next",
            title="Clarify what you want to do",
            success_check="A concrete task or goal is defined",
        )

    return CoachOutput(steps=[step], actions=actions)


def coach_for_engine(engine: str, output: Any) -> CoachOutput:
    if engine == "plan":
        return coach_from_plan(output)
    if engine == "workout":
        return coach_from_workout(output)
    if engine == "summary":
        return coach_from_summary(output)
    return coach_from_direct()
