"""Deterministic plan, workout and summary engines.

Each engine is a pure function of (mode, goal): the same inputs always give the
same items and coach block. Only the ids and timestamps of the workout engine's
seed actions differ between calls.
"""

from loguru import logger

from brain.actions.types import (
    ActionKind,
    LogWorkoutPayload,
    StartFocusBlockPayload,
    new_action,
)
from brain.engines.types import CoachBlock, EngineCoachStep, EngineResponse, Priority, is_mode

FALLBACK_GOAL = "make progress"
WORKOUT_SESSION_TITLE = "Workout Session"
WORKOUT_SESSION_MIN = 45


def clamp_goal(goal: str | None) -> str:
    cleaned = (goal if isinstance(goal, str) else "").strip()
    return cleaned or FALLBACK_GOAL


def normalize_mode(mode: str | None) -> str:
    return mode if is_mode(mode) else "student"


def _coach(goal: str, priority: Priority, steps: list[EngineCoachStep]) -> CoachBlock:
    return CoachBlock(goal=goal, priority=priority, steps=steps)


def _plan_items(mode: str, goal: str) -> list[str]:
    if mode == "freelancer":
        return [
            f'Define success: what does "{goal}" mean in $$ or deliverables?',
            "List 3 highest-impact tasks (client / portfolio / outreach).",
            "Do 25 min deep work (one task).",
            "Ship something visible (draft, post, pitch, update).",
            "Repeat: 25 min focus + 5 min break x2.",
            "End: write the next tiny step and schedule it.",
        ]
    if mode == "creator":
        return [
            f'Define success: what does "{goal}" look like (views, uploads, revenue)?',
            "Pick ONE piece to publish this week (video/post/thread).",
            "Outline in 10 mins (hook → points → CTA).",
            "Create 25 mins focused (no perfection cosplay).",
            "Publish or schedule (yes, even if it's mid).",
            "End: write next session’s first step.",
        ]
    return [
        f'Define success: what does "{goal}" mean in 1 measurable sentence?',
        "List 3 weak topics (from syllabus / past mistakes).",
        "Do 25 min active recall (no notes), then check answers.",
        "Fix mistakes: write 3 bullets on why you got them wrong.",
        "Repeat: 25 min focus + 5 min break x2.",
        "End: write next session’s first task (so future-you can’t dodge).",
    ]


def generate_plan(mode: str, goal: str) -> EngineResponse:
    mode = normalize_mode(mode)
    goal = clamp_goal(goal)

    coach = _coach(goal, "high", [
        EngineCoachStep(
            id="define",
            title="Turn the goal into a number you can chase",
            duration_mins=5,
            success_check="You wrote 1 measurable sentence",
            next_if_stuck="Use: By (date), I will (metric).",
            checklist=["1 measurable sentence", "deadline/date"],
        ),
        EngineCoachStep(
            id="execute",
            title="One focused block (Pomodoro)",
            duration_mins=25,
            success_check="25 mins done, no distractions",
            checklist=["timer running", "notifications off"],
        ),
    ])

    return EngineResponse(ok=True, engine="plan", mode=mode, goal=goal, items=_plan_items(mode, goal), coach=coach)


def _workout_items(mode: str) -> list[str]:
    if mode == "creator":
        return [
            "5 min warm-up (mobility + light cardio)",
            "Push-ups: 3 sets (leave 2 reps in tank)",
            "Rows (band/dumbbell): 3 sets",
            "Overhead press (DB/bar): 3 sets",
            "Plank: 2 x 45s",
            "Cool down + stretch 5 min",
        ]
    return [
        "5 min warm-up (jumping jacks / brisk walk)",
        "Push-ups: 3 sets (stop 2 reps before failure)",
        "Rows (band/dumbbell): 3 sets",
        "Squats: 3 sets",
        "Plank: 2 x 45s",
        "Cool down + stretch 5 min",
    ]


def generate_workout(mode: str, goal: str) -> EngineResponse:
    mode = normalize_mode(mode)
    goal = clamp_goal(goal)

    coach = _coach(goal, "medium", [
        EngineCoachStep(
            id="intent",
            title="Decide today’s training intent",
            duration_mins=2,
            success_check="You chose strength / hypertrophy / conditioning",
            checklist=["intent chosen", "rep range picked"],
        ),
        EngineCoachStep(
            id="execute",
            title="Run the workout",
            duration_mins=WORKOUT_SESSION_MIN,
            success_check="Workout completed or honestly attempted",
        ),
    ])

    actions = [
        new_action(
            ActionKind.START_FOCUS_BLOCK,
            label=f"Start workout ({WORKOUT_SESSION_MIN} min)",
            payload=StartFocusBlockPayload(title=WORKOUT_SESSION_TITLE, duration_min=WORKOUT_SESSION_MIN, mode="deep"),
            trust="confirm",
            priority="high",
            reason="Best workout is the one you actually start.",
            prefix="start_workout",
        ),
        new_action(
            ActionKind.LOG_WORKOUT,
            label="Log workout",
            payload=LogWorkoutPayload(title=WORKOUT_SESSION_TITLE, duration_min=WORKOUT_SESSION_MIN),
            trust="confirm",
            priority="normal",
            reason="Logging improves future programming.",
            prefix="log_workout",
        ),
    ]

    return EngineResponse(
        ok=True,
        engine="workout",
        mode=mode,
        goal=goal,
        items=_workout_items(mode),
        coach=coach,
        actions=actions,
    )


def generate_summary(mode: str, goal: str) -> EngineResponse:
    mode = normalize_mode(mode)
    goal = clamp_goal(goal)

    items = [
        f"Mode: {mode}",
        f"Main goal: {goal}",
        "Next best action: pick 1 task and do 25 minutes focused",
        "Rule: one tab, notifications off",
    ]

    coach = _coach(goal, "low", [
        EngineCoachStep(
            id="one-thing",
            title="Choose the ONE thing",
            duration_mins=2,
            success_check="You can say the next action in 7 words",
            checklist=["single action"],
        ),
    ])

    return EngineResponse(ok=True, engine="summary", mode=mode, goal=goal, items=items, coach=coach)


def run_engine(engine: str, mode: str, goal: str) -> EngineResponse:
    """Run one engine. Unknown engine names fall through to the summary engine."""
    logger.debug("Running engine", engine=engine, mode=mode)
    if engine == "plan":
        return generate_plan(mode, goal)
    if engine == "workout":
        return generate_workout(mode, goal)
    return generate_summary(mode, goal)
