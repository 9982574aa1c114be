from typing import Any

from fastapi import APIRouter
from loguru import logger
from pydantic import BaseModel

from brain.assistant.memory import get_memory_store
from brain.assistant.orchestrator import AssistantRequest, AssistantResponse, run_assistant
from brain.engines.generators import run_engine
from brain.engines.types import EngineResponse, is_engine_name, is_mode

router = APIRouter(tags=["assistant"])


# -----------------------------
# Request schema
# -----------------------------
class EngineRequest(BaseModel):
    engine: Any = None
    mode: Any = None
    goal: Any = None


# -----------------------------
# Assistant endpoint
# -----------------------------
@router.post("/assistant", response_model=AssistantResponse)
async def assistant(req: AssistantRequest):
    logger.info("Assistant request", mode=req.mode)
    return await run_assistant(req, memory=get_memory_store())


# -----------------------------
# Direct engine endpoint
# -----------------------------
@router.post("/engine", response_model=EngineResponse)
def engine(req: EngineRequest):
    engine_name = req.engine if is_engine_name(req.engine) else "plan"
    mode = req.mode if is_mode(req.mode) else "student"
    goal = req.goal if isinstance(req.goal, str) else ""
    return run_engine(engine_name, mode, goal)
