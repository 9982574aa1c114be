"""Action system contracts.

Action kinds are a closed set. Every kind has exactly one payload model and one
Action variant; ``Action`` is the discriminated union over those variants, keyed
by ``kind``. Payload models require their fields to be present but do not judge
their content: that is the job of the executor's ``validate``.

Models are snake_case in Python and camelCase on the wire (``actionId``,
``durationMin``, ``executedAt``). Both spellings are accepted on input.
"""

import secrets
import time
from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

ActionPriority = Literal["low", "normal", "high"]
ActionTrust = Literal["confirm", "auto"]
FocusMode = Literal["pomodoro", "deep", "sprint"]
ViewName = Literal["chat", "plan", "workout", "summary", "focus", "timeline", "settings"]
CalendarProvider = Literal["google", "outlook", "internal"]
EmailProvider = Literal["gmail", "outlook", "internal"]


class ActionKind(StrEnum):
    # Internal / core
    START_FOCUS_BLOCK = "start_focus_block"
    END_FOCUS_BLOCK = "end_focus_block"
    CREATE_CHECKLIST = "create_checklist"
    CREATE_TASK = "create_task"
    COMPLETE_TASK = "complete_task"
    OPEN_VIEW = "open_view"
    SET_GOAL = "set_goal"
    SET_PREFERENCE = "set_preference"
    LOG_EVENT = "log_event"
    # Workout
    LOG_WORKOUT = "log_workout"
    ADJUST_WORKOUT = "adjust_workout"
    # Calendar / email
    SCHEDULE_EVENT = "schedule_event"
    UPDATE_EVENT = "update_event"
    CANCEL_EVENT = "cancel_event"
    DRAFT_EMAIL = "draft_email"
    SEND_EMAIL = "send_email"
    # Automation bridges
    TRIGGER_WEBHOOK = "trigger_webhook"
    RUN_AUTOMATION = "run_automation"


def utc_now() -> datetime:
    return datetime.now(UTC)


def make_action_id(prefix: str = "act") -> str:
    """Opaque id: prefix, epoch milliseconds and a random hex suffix."""
    return f"{prefix}_{int(time.time() * 1000)}_{secrets.token_hex(6)}"


class WireModel(BaseModel):
    """Base for models exchanged with hosts."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Payload(WireModel):
    """Base payload. Integration-specific extras go in ``meta``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    meta: dict[str, Any] | None = None


# -----------------------------
# Payloads
# -----------------------------
class StartFocusBlockPayload(Payload):
    title: str
    duration_min: int
    break_min: int | None = None
    mode: FocusMode | None = None


class EndFocusBlockPayload(Payload):
    focus_block_id: str | None = None
    outcome: Literal["completed", "stopped_early", "skipped"] | None = None
    notes: str | None = None


class ChecklistItem(WireModel):
    text: str
    done: bool | None = None
    estimate_min: int | None = None


class CreateChecklistPayload(Payload):
    title: str
    items: list[ChecklistItem]


class CreateTaskPayload(Payload):
    title: str
    due_at: datetime | None = None
    estimate_min: int | None = None
    tags: list[str] | None = None


class CompleteTaskPayload(Payload):
    task_id: str


class OpenViewPayload(Payload):
    view: ViewName
    params: dict[str, str] | None = None


class SetGoalPayload(Payload):
    key: str  # e.g. "fitness.goal"
    value: str


class SetPreferencePayload(Payload):
    key: str  # e.g. "workout.equipmentPreference"
    value: str


class LogEventPayload(Payload):
    kind: str  # e.g. "workout_session", "study_block", "reflection"
    title: str
    details: dict[str, Any] | None = None
    happened_at: datetime | None = None


class LogWorkoutPayload(Payload):
    title: str
    workout_id: str | None = None
    duration_min: int | None = None
    rpe: float | None = None  # 1-10
    notes: str | None = None


class AdjustWorkoutPayload(Payload):
    workout_id: str | None = None
    intensity: Literal["low", "moderate", "high"] | None = None
    focus: list[Literal["strength", "hypertrophy", "conditioning", "mobility"]] | None = None
    constraints: list[str] | None = None  # e.g. ["no_lunges_space", "fatigued"]


class ScheduleEventPayload(Payload):
    title: str
    start_at: datetime
    end_at: datetime
    location: str | None = None
    description: str | None = None
    attendees: list[str] | None = None
    calendar_provider: CalendarProvider | None = None


class EventPatch(WireModel):
    title: str | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None
    location: str | None = None
    description: str | None = None
    attendees: list[str] | None = None


class UpdateEventPayload(Payload):
    event_id: str
    patch: EventPatch
    calendar_provider: CalendarProvider | None = None


class CancelEventPayload(Payload):
    event_id: str
    calendar_provider: CalendarProvider | None = None
    reason: str | None = None


class DraftEmailPayload(Payload):
    to: list[str]
    subject: str
    body_text: str
    cc: list[str] | None = None
    bcc: list[str] | None = None
    body_html: str | None = None
    provider: EmailProvider | None = None


class SendEmailPayload(DraftEmailPayload):
    draft_id: str | None = None


class TriggerWebhookPayload(Payload):
    url: str
    method: Literal["POST", "PUT", "PATCH"] | None = None
    headers: dict[str, str] | None = None
    body: Any = None


class RunAutomationPayload(Payload):
    provider: Literal["zapier", "make", "n8n", "custom"]
    workflow_id: str | None = None
    name: str | None = None
    input: dict[str, Any] | None = None


# -----------------------------
# Actions
# -----------------------------
class ActionBase(WireModel):
    """Fields shared by every action variant."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(default_factory=make_action_id)
    priority: ActionPriority | None = None
    trust: ActionTrust | None = None
    label: str
    reason: str | None = None
    created_at: datetime | None = None


class StartFocusBlockAction(ActionBase):
    kind: Literal["start_focus_block"] = "start_focus_block"
    payload: StartFocusBlockPayload


class EndFocusBlockAction(ActionBase):
    kind: Literal["end_focus_block"] = "end_focus_block"
    payload: EndFocusBlockPayload


class CreateChecklistAction(ActionBase):
    kind: Literal["create_checklist"] = "create_checklist"
    payload: CreateChecklistPayload


class CreateTaskAction(ActionBase):
    kind: Literal["create_task"] = "create_task"
    payload: CreateTaskPayload


class CompleteTaskAction(ActionBase):
    kind: Literal["complete_task"] = "complete_task"
    payload: CompleteTaskPayload


class OpenViewAction(ActionBase):
    kind: Literal["open_view"] = "open_view"
    payload: OpenViewPayload


class SetGoalAction(ActionBase):
    kind: Literal["set_goal"] = "set_goal"
    payload: SetGoalPayload


class SetPreferenceAction(ActionBase):
    kind: Literal["set_preference"] = "set_preference"
    payload: SetPreferencePayload


class LogEventAction(ActionBase):
    kind: Literal["log_event"] = "log_event"
    payload: LogEventPayload


class LogWorkoutAction(ActionBase):
    kind: Literal["log_workout"] = "log_workout"
    payload: LogWorkoutPayload


class AdjustWorkoutAction(ActionBase):
    kind: Literal["adjust_workout"] = "adjust_workout"
    payload: AdjustWorkoutPayload


class ScheduleEventAction(ActionBase):
    kind: Literal["schedule_event"] = "schedule_event"
    payload: ScheduleEventPayload


class UpdateEventAction(ActionBase):
    kind: Literal["update_event"] = "update_event"
    payload: UpdateEventPayload


class CancelEventAction(ActionBase):
    kind: Literal["cancel_event"] = "cancel_event"
    payload: CancelEventPayload


class DraftEmailAction(ActionBase):
    kind: Literal["draft_email"] = "draft_email"
    payload: DraftEmailPayload


class SendEmailAction(ActionBase):
    kind: Literal["send_email"] = "send_email"
    payload: SendEmailPayload


class TriggerWebhookAction(ActionBase):
    kind: Literal["trigger_webhook"] = "trigger_webhook"
    payload: TriggerWebhookPayload


class RunAutomationAction(ActionBase):
    kind: Literal["run_automation"] = "run_automation"
    payload: RunAutomationPayload


Action = Annotated[
    StartFocusBlockAction
    | EndFocusBlockAction
    | CreateChecklistAction
    | CreateTaskAction
    | CompleteTaskAction
    | OpenViewAction
    | SetGoalAction
    | SetPreferenceAction
    | LogEventAction
    | LogWorkoutAction
    | AdjustWorkoutAction
    | ScheduleEventAction
    | UpdateEventAction
    | CancelEventAction
    | DraftEmailAction
    | SendEmailAction
    | TriggerWebhookAction
    | RunAutomationAction,
    Field(discriminator="kind"),
]

ACTION_VARIANTS: dict[ActionKind, type[ActionBase]] = {
    ActionKind.START_FOCUS_BLOCK: StartFocusBlockAction,
    ActionKind.END_FOCUS_BLOCK: EndFocusBlockAction,
    ActionKind.CREATE_CHECKLIST: CreateChecklistAction,
    ActionKind.CREATE_TASK: CreateTaskAction,
    ActionKind.COMPLETE_TASK: CompleteTaskAction,
    ActionKind.OPEN_VIEW: OpenViewAction,
    ActionKind.SET_GOAL: SetGoalAction,
    ActionKind.SET_PREFERENCE: SetPreferenceAction,
    ActionKind.LOG_EVENT: LogEventAction,
    ActionKind.LOG_WORKOUT: LogWorkoutAction,
    ActionKind.ADJUST_WORKOUT: AdjustWorkoutAction,
    ActionKind.SCHEDULE_EVENT: ScheduleEventAction,
    ActionKind.UPDATE_EVENT: UpdateEventAction,
    ActionKind.CANCEL_EVENT: CancelEventAction,
    ActionKind.DRAFT_EMAIL: DraftEmailAction,
    ActionKind.SEND_EMAIL: SendEmailAction,
    ActionKind.TRIGGER_WEBHOOK: TriggerWebhookAction,
    ActionKind.RUN_AUTOMATION: RunAutomationAction,
}

_ACTION_ADAPTER: TypeAdapter[Action] = TypeAdapter(Action)


def validate_closed_union() -> None:
    """Guard: every kind has exactly one variant whose tag matches it.

    Raises:
        RuntimeError: If a kind is missing a variant or a variant is mis-tagged
    """
    missing = [kind.value for kind in ActionKind if kind not in ACTION_VARIANTS]
    if missing:
        raise RuntimeError(f"Action kinds without a variant: {missing}")
    for kind, model in ACTION_VARIANTS.items():
        if model.model_fields["kind"].default != kind.value:
            raise RuntimeError(f"Action variant {model.__name__} is not tagged {kind.value}")


# Validate on import
validate_closed_union()


def parse_action(data: Any) -> Action:
    """Validate a raw mapping (camelCase or snake_case) into its Action variant.

    Raises:
        pydantic.ValidationError: If the kind is unknown or the payload does not fit it
    """
    return _ACTION_ADAPTER.validate_python(data)


def new_action(
    kind: ActionKind | str,
    *,
    label: str,
    payload: Payload | dict[str, Any],
    trust: ActionTrust | None = None,
    priority: ActionPriority | None = None,
    reason: str | None = None,
    prefix: str = "act",
) -> Action:
    """Build an action with a fresh id and creation time."""
    model = ACTION_VARIANTS[ActionKind(kind)]
    return model(
        id=make_action_id(prefix),
        label=label,
        payload=payload,
        trust=trust,
        priority=priority,
        reason=reason,
        created_at=utc_now(),
    )


# -----------------------------
# Execution
# -----------------------------
class ActionError(WireModel):
    code: str
    detail: str | None = None


class ActionResult(WireModel):
    """Standard executor result. Always produced, even when an executor fails."""

    ok: bool
    action_id: str
    kind: ActionKind
    message: str | None = None
    data: Any = None
    error: ActionError | None = None
    executed_at: datetime

    @classmethod
    def success(cls, action: ActionBase, message: str | None = None, data: Any = None) -> "ActionResult":
        return cls(
            ok=True,
            action_id=action.id,
            kind=action.kind,
            message=message,
            data=data,
            executed_at=utc_now(),
        )

    @classmethod
    def failure(cls, action: ActionBase, code: str, detail: str | None = None) -> "ActionResult":
        return cls(
            ok=False,
            action_id=action.id,
            kind=action.kind,
            message=detail,
            error=ActionError(code=code, detail=detail),
            executed_at=utc_now(),
        )


class ExecutionContext(WireModel):
    """Context handed to executors. ``now`` is resolved by the wrapper when absent."""

    user_id: str | None = None
    now: datetime | None = None
    meta: dict[str, Any] = Field(default_factory=dict)
