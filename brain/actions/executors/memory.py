"""Memory-backed executors for set_goal and set_preference.

Registered at startup against a memory store. Neither kind is in the
safe allowlist, so they wait for confirmation unless marked auto.
"""

from brain.actions.registry import ActionExecutor, ExecutorRegistry
from brain.actions.types import ActionKind, ActionResult, ExecutionContext
from brain.assistant.memory import MemoryStore, MemoryWrite


class _MemoryWriteExecutor(ActionExecutor):
    memory_type: str
    saved_message: str

    def __init__(self, store: MemoryStore) -> None:
        self._store = store

    def validate(self, action) -> str | None:
        if not action.payload.key.strip():
            return "Memory key is required"
        if not action.payload.value.strip():
            return "Memory value is required"
        return None

    async def execute(self, action, context: ExecutionContext) -> ActionResult:
        item = await self._store.upsert(
            MemoryWrite(type=self.memory_type, key=action.payload.key.strip(), value=action.payload.value.strip())
        )
        return ActionResult.success(action, self.saved_message, item.model_dump(mode="json", by_alias=True))


class SetGoalExecutor(_MemoryWriteExecutor):
    kind = ActionKind.SET_GOAL
    memory_type = "goal"
    saved_message = "Goal saved"


class SetPreferenceExecutor(_MemoryWriteExecutor):
    kind = ActionKind.SET_PREFERENCE
    memory_type = "preference"
    saved_message = "Preference saved"


def register_memory_executors(registry: ExecutorRegistry, store: MemoryStore) -> None:
    registry.register_many([SetGoalExecutor(store), SetPreferenceExecutor(store)])
