"""First-party action executors.

These depend on no external service and are safe to run automatically once the
trust policy allows it. They describe what happened; the host application owns
timers, persistence and navigation.
"""

from brain.actions.registry import ActionExecutor, ExecutorRegistry
from brain.actions.types import (
    ActionKind,
    ActionResult,
    CreateChecklistAction,
    ExecutionContext,
    LogWorkoutAction,
    OpenViewAction,
    StartFocusBlockAction,
)


class StartFocusBlockExecutor(ActionExecutor):
    """Logical start of a focus block (no timer is created here)."""

    kind = ActionKind.START_FOCUS_BLOCK

    def validate(self, action: StartFocusBlockAction) -> str | None:
        if not action.payload.title:
            return "Focus block title is required"
        if not action.payload.duration_min or action.payload.duration_min <= 0:
            return "durationMin must be > 0"
        return None

    async def execute(self, action: StartFocusBlockAction, context: ExecutionContext) -> ActionResult:
        payload = action.payload
        return ActionResult.success(
            action,
            "Focus block started",
            {
                "title": payload.title,
                "durationMin": payload.duration_min,
                "breakMin": payload.break_min,
                "mode": payload.mode or "pomodoro",
                "startedAt": context.now.isoformat() if context.now else None,
            },
        )


class CreateChecklistExecutor(ActionExecutor):
    """Returns structured checklist data for the UI and memory."""

    kind = ActionKind.CREATE_CHECKLIST

    def validate(self, action: CreateChecklistAction) -> str | None:
        if not action.payload.title:
            return "Checklist title is required"
        if not action.payload.items:
            return "Checklist must have at least one item"
        return None

    async def execute(self, action: CreateChecklistAction, context: ExecutionContext) -> ActionResult:
        items = []
        for idx, item in enumerate(action.payload.items, start=1):
            entry = {"id": f"item_{idx}", "text": item.text, "done": bool(item.done)}
            if item.estimate_min is not None:
                entry["estimateMin"] = item.estimate_min
            items.append(entry)
        return ActionResult.success(action, "Checklist created", {"title": action.payload.title, "items": items})


class OpenViewExecutor(ActionExecutor):
    """Signals the UI to navigate. No server-side side effects."""

    kind = ActionKind.OPEN_VIEW

    def validate(self, action: OpenViewAction) -> str | None:
        if not action.payload.view:
            return "View is required"
        return None

    async def execute(self, action: OpenViewAction, context: ExecutionContext) -> ActionResult:
        return ActionResult.success(
            action,
            "Navigation requested",
            {"view": action.payload.view, "params": dict(action.payload.params or {})},
        )


class LogWorkoutExecutor(ActionExecutor):
    kind = ActionKind.LOG_WORKOUT

    def validate(self, action: LogWorkoutAction) -> str | None:
        if not action.payload.title:
            return "Workout title is required"
        return None

    async def execute(self, action: LogWorkoutAction, context: ExecutionContext) -> ActionResult:
        data = action.payload.model_dump(mode="json", by_alias=True, exclude_none=True)
        data["loggedAt"] = context.now.isoformat() if context.now else None
        return ActionResult.success(action, "Workout logged", data)


def internal_executors() -> list[ActionExecutor]:
    return [
        StartFocusBlockExecutor(),
        CreateChecklistExecutor(),
        OpenViewExecutor(),
        LogWorkoutExecutor(),
    ]


def register_internal_executors(registry: ExecutorRegistry) -> None:
    registry.register_many(internal_executors())
