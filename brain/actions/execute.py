"""Safe execution wrapper for actions.

This is the single failure-containment boundary of the action subsystem:
- looks up the executor for the action's kind
- runs the executor's optional validation; a reported problem means execute is never called
- executes with a context whose ``now`` is always resolved
- normalizes whatever the executor returned

``execute_action`` never raises. Every outcome is an ``ActionResult``.
"""

import inspect
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from brain.actions.errors import ActionErrorCode, ExecutorContractError
from brain.actions.registry import ExecutorRegistry, get_registry
from brain.actions.types import ActionResult, ExecutionContext, utc_now

_TIMESTAMP = TypeAdapter(datetime)


def _describe(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


def _merge_context(context: ExecutionContext | Mapping[str, Any] | None) -> ExecutionContext:
    if context is None:
        merged = ExecutionContext()
    elif isinstance(context, ExecutionContext):
        merged = context
    else:
        merged = ExecutionContext.model_validate(context)
    if merged.now is None:
        merged = merged.model_copy(update={"now": utc_now()})
    return merged


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _executed_at(reported: Any, started_at: datetime) -> datetime:
    """Executor-reported completion time, or now when missing, unreadable or before the start."""
    if not reported:
        return utc_now()
    try:
        executed_at = _as_utc(_TIMESTAMP.validate_python(reported))
    except ValidationError:
        logger.warning("Executor reported an unreadable executedAt", reported=str(reported))
        return utc_now()
    return executed_at if executed_at >= started_at else utc_now()


def _normalize(action, raw: Any, started_at: datetime) -> ActionResult:
    """Coerce an executor's return value into a well-formed result.

    Raises:
        ExecutorContractError: If the executor returned neither a result nor a mapping
    """
    if isinstance(raw, ActionResult):
        fields = {name: getattr(raw, name) for name in ActionResult.model_fields}
    elif isinstance(raw, Mapping):
        fields = dict(raw)
    else:
        raise ExecutorContractError(str(action.kind), f"Executor for {action.kind} returned {type(raw).__name__}")

    error = fields.get("error")
    if isinstance(error, str):
        error = {"code": error}

    return ActionResult.model_validate({
        "ok": bool(fields.get("ok")),
        "action_id": fields.get("action_id") or fields.get("actionId") or action.id,
        "kind": fields.get("kind") or action.kind,
        "message": fields.get("message"),
        "data": fields.get("data"),
        "error": error,
        "executed_at": _executed_at(fields.get("executed_at") or fields.get("executedAt"), started_at),
    })


async def execute_action(
    action,
    context: ExecutionContext | Mapping[str, Any] | None = None,
    *,
    registry: ExecutorRegistry | None = None,
) -> ActionResult:
    """Execute an action through its registered executor.

    Args:
        action: Action to execute
        context: Optional execution context; ``now`` is filled in when missing
        registry: Registry to resolve the executor from (process-wide default if None)

    Returns:
        ActionResult; ok=False with error.code NO_EXECUTOR, VALIDATION_ERROR,
        VALIDATION_CRASH or EXECUTION_CRASH on failure
    """
    started_at = utc_now()
    registry = registry if registry is not None else get_registry()
    kind = action.kind

    executor = registry.lookup(kind)
    if executor is None:
        logger.warning("No executor registered", kind=kind, action_id=action.id)
        return ActionResult.failure(action, ActionErrorCode.NO_EXECUTOR, f"No executor registered for {kind}")

    try:
        validate = getattr(executor, "validate", None)
        problem = validate(action) if callable(validate) else None
    except Exception as e:
        logger.exception(f"Validation crashed for {kind}")
        return ActionResult.failure(action, ActionErrorCode.VALIDATION_CRASH, _describe(e))

    # validate must be synchronous
    if inspect.isawaitable(problem):
        if inspect.iscoroutine(problem):
            problem.close()
        logger.error(f"Executor for {kind} has an async validate")
        return ActionResult.failure(
            action, ActionErrorCode.VALIDATION_CRASH, f"validate for {kind} must be synchronous"
        )

    if problem:
        logger.warning("Action failed validation", kind=kind, action_id=action.id, problem=problem)
        return ActionResult.failure(action, ActionErrorCode.VALIDATION_ERROR, str(problem))

    try:
        merged_context = _merge_context(context)
        raw = await executor.execute(action, merged_context)
        result = _normalize(action, raw, started_at)
    except Exception as e:
        logger.exception(f"Executor crashed for {kind}")
        return ActionResult.failure(action, ActionErrorCode.EXECUTION_CRASH, _describe(e))

    logger.info("Action executed", kind=kind, action_id=action.id, ok=result.ok)
    return result
