from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError

from brain.actions.execute import execute_action
from brain.actions.registry import get_registry
from brain.actions.trust import TrustDecision, decide_trust
from brain.actions.types import ExecutionContext, parse_action

router = APIRouter(prefix="/actions", tags=["actions"])


def _bad_request(error: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"ok": False, "error": error})


async def _read_body(request: Request) -> dict[str, Any] | None:
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


@router.post("/execute")
async def execute(request: Request):
    body = await _read_body(request)
    if body is None:
        return _bad_request("Missing request body")

    raw_action = body.get("action")
    if not isinstance(raw_action, dict):
        return _bad_request("Missing action")

    try:
        action = parse_action(raw_action)
        context = ExecutionContext.model_validate(body.get("ctx") or {})
    except ValidationError as e:
        logger.warning("Rejected malformed action", errors=e.error_count())
        return _bad_request(str(e))

    logger.info("Execute action request", kind=action.kind, action_id=action.id)
    result = await execute_action(action, context)
    return result.model_dump(mode="json", by_alias=True, exclude_none=True)


@router.post("/trust", response_model=TrustDecision)
async def trust(request: Request):
    body = await _read_body(request)
    if body is None or not isinstance(body.get("action"), dict):
        return _bad_request("Missing action")

    try:
        action = parse_action(body["action"])
    except ValidationError as e:
        return _bad_request(str(e))

    return decide_trust(action)


@router.get("/executors")
def executors():
    return {"executors": get_registry().list_registered()}
