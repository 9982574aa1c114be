"""Trust policy: may an action run without the user confirming it?

Pure and deterministic. Decision order:
- explicit "auto" runs
- explicit "confirm" waits (this beats the allowlist)
- kinds in the safe internal allowlist run
- everything else waits
"""

from brain.actions.types import ActionKind, WireModel

SAFE_AUTO_KINDS: frozenset[ActionKind] = frozenset({
    ActionKind.OPEN_VIEW,
    ActionKind.CREATE_CHECKLIST,
    ActionKind.START_FOCUS_BLOCK,
})


class TrustDecision(WireModel):
    should_auto_run: bool
    reason: str


def decide_trust(action) -> TrustDecision:
    if action.trust == "auto":
        return TrustDecision(should_auto_run=True, reason="explicit auto")

    if action.trust == "confirm":
        return TrustDecision(should_auto_run=False, reason="explicit confirm")

    if action.kind in SAFE_AUTO_KINDS:
        return TrustDecision(should_auto_run=True, reason="safe internal kind")

    return TrustDecision(should_auto_run=False, reason="not in safe allowlist")
