"""Executor registry: action kind -> executor.

All registrations are expected to complete during startup, before the first
lookup; ``seal()`` marks that barrier. Writes swap in a fresh mapping under a
lock, so lookups never take the lock and never observe a partial update.
"""

from abc import ABC, abstractmethod
from threading import Lock

from loguru import logger

from brain.actions.types import ActionKind, ActionResult, ExecutionContext


class ActionExecutor(ABC):
    """Knows how to perform one action kind.

    Subclasses may also define ``validate(action) -> str | None``: return a
    description of the problem, or None when the action is valid. Keep it cheap
    and free of side effects.
    """

    kind: ActionKind

    @abstractmethod
    async def execute(self, action, context: ExecutionContext) -> ActionResult:
        """Perform the action. Should report failure as ok=False rather than raise."""


class ExecutorRegistry:
    """Registry for action executors, one per kind (last registration wins)."""

    def __init__(self, name: str = "default") -> None:
        self.name = name
        self._executors: dict[str, ActionExecutor] = {}
        self._lock = Lock()
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def register(self, executor: ActionExecutor) -> None:
        """Register (or overwrite) the executor for ``executor.kind``."""
        kind = str(executor.kind)
        with self._lock:
            if self._sealed:
                logger.warning(
                    "Executor registered after startup (configuration change)",
                    registry=self.name,
                    kind=kind,
                )
            if kind in self._executors:
                logger.debug("Overwriting executor", registry=self.name, kind=kind)
            updated = dict(self._executors)
            updated[kind] = executor
            self._executors = updated

    def register_many(self, executors: list[ActionExecutor]) -> None:
        for executor in executors:
            self.register(executor)

    def lookup(self, kind: str) -> ActionExecutor | None:
        return self._executors.get(str(kind))

    def list_registered(self) -> list[str]:
        """Kinds with an executor. For diagnostics and health checks."""
        return list(self._executors)

    def seal(self) -> None:
        """Mark the end of the initialization phase."""
        with self._lock:
            self._sealed = True
        logger.info("Executor registry sealed", registry=self.name, kinds=self.list_registered())

    def clear(self) -> None:
        """Drop all executors and reopen the registry. Intended for tests."""
        with self._lock:
            self._executors = {}
            self._sealed = False


# Process-wide registry used when callers do not pass their own
_default_registry = ExecutorRegistry()


def get_registry() -> ExecutorRegistry:
    return _default_registry
