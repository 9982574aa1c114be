"""Sequential, at-most-once dispatch of actions.

The core does not order or de-duplicate executions. A consumer that auto-runs
actions must run at most one at a time and must never re-attempt an action id
it has already dispatched. ``ActionDispatcher`` is that consumer contract.
"""

import asyncio
from collections.abc import Iterable

from loguru import logger

from brain.actions.execute import execute_action
from brain.actions.registry import ExecutorRegistry
from brain.actions.trust import decide_trust
from brain.actions.types import ActionResult, ExecutionContext


class ActionDispatcher:
    """Dispatches actions one at a time, each action id at most once.

    One dispatcher per consumer session (e.g. one per UI session or per
    conversation). Ids are remembered for the dispatcher's lifetime.
    """

    def __init__(
        self,
        registry: ExecutorRegistry | None = None,
        context: ExecutionContext | None = None,
        session_id: str | None = None,
    ):
        """Initialize the dispatcher.

        Args:
            registry: Registry handed to the execution wrapper (default registry if None)
            context: Context used for every dispatch (``now`` resolved per call)
            session_id: Identifier used in log lines (optional)
        """
        self.session_id = session_id
        self._registry = registry
        self._context = context
        self._dispatched: set[str] = set()
        self._in_flight = asyncio.Lock()

    def has_dispatched(self, action_id: str) -> bool:
        return action_id in self._dispatched

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    async def dispatch(self, action) -> ActionResult | None:
        """Execute ``action`` unless its id was already dispatched.

        Returns:
            The action's result, or None when the id was seen before
        """
        # Mark before awaiting the lock so a concurrent duplicate is rejected
        if action.id in self._dispatched:
            logger.debug("Skipping already dispatched action", action_id=action.id, session_id=self.session_id)
            return None
        self._dispatched.add(action.id)

        async with self._in_flight:
            return await execute_action(action, self._context, registry=self._registry)

    async def auto_run(self, actions: Iterable) -> list[ActionResult]:
        """Dispatch, in order, the actions the trust policy allows to run unattended.

        Actions that need confirmation are left for the user and are not marked
        as dispatched.
        """
        results: list[ActionResult] = []
        for action in actions:
            decision = decide_trust(action)
            if not decision.should_auto_run:
                logger.debug(
                    "Action awaits confirmation",
                    action_id=action.id,
                    kind=action.kind,
                    reason=decision.reason,
                )
                continue
            result = await self.dispatch(action)
            if result is not None:
                results.append(result)
        return results

    def reset(self) -> None:
        """Forget dispatched ids. Useful for testing."""
        self._dispatched.clear()
        logger.debug("Action dispatcher reset", session_id=self.session_id)
