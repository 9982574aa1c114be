"""Startup registration of executors.

Call ``init_executors()`` once before serving requests (FastAPI lifespan, CLI
entry). It is idempotent: a sealed registry is left untouched.
"""

from loguru import logger

from brain.actions.executors.internal import register_internal_executors
from brain.actions.executors.memory import register_memory_executors
from brain.actions.registry import ExecutorRegistry, get_registry
from brain.assistant.memory import MemoryStore, get_memory_store
from brain.config.settings import settings


def init_executors(
    registry: ExecutorRegistry | None = None,
    *,
    memory: MemoryStore | None = None,
    include_internal: bool | None = None,
) -> ExecutorRegistry:
    """Register executors and seal the registry.

    Args:
        registry: Registry to populate (process-wide default if None)
        memory: Store for set_goal/set_preference (the local in-memory store if None)
        include_internal: Register first-party executors (settings default if None)

    Returns:
        The sealed registry
    """
    registry = registry if registry is not None else get_registry()
    if registry.sealed:
        return registry

    if include_internal is None:
        include_internal = settings.register_internal_executors

    if include_internal:
        register_internal_executors(registry)
    register_memory_executors(registry, memory if memory is not None else get_memory_store())

    registry.seal()
    logger.info(f"Executors initialized: {', '.join(registry.list_registered())}")
    return registry
