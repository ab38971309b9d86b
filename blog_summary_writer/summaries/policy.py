"""Rules deciding whether an existing summary may be replaced."""
from __future__ import annotations

import dataclasses
from typing import Callable, Optional

from .normalize import preview_text
from .types import OverwriteDecision, OverwritePolicy, RunConfig

OVERWRITE_POLICIES = ("ask", "always", "never")

Confirmer = Callable[[str], bool]


def decide_overwrite(
    policy: OverwritePolicy,
    existing: Optional[str],
    confirm: Optional[Confirmer] = None,
) -> OverwriteDecision:
    """Return whether a document may be (re)written.

    ``existing`` is the current summary value, ``None`` when the field is absent.
    ``confirm`` receives a short preview of the existing value and answers the
    ``ask`` policy; without one there is no interactive session and the answer
    is no.
    """
    if existing is None:
        return OverwriteDecision(proceed=True, reason="no-existing-summary")
    if policy == "always":
        return OverwriteDecision(proceed=True, reason="policy-always")
    if policy == "ask":
        if confirm is None:
            return OverwriteDecision(proceed=False, reason="no-interactive-session")
        if confirm(preview_text(existing, 80)):
            return OverwriteDecision(proceed=True, reason="confirmed")
        return OverwriteDecision(proceed=False, reason="declined")
    return OverwriteDecision(proceed=False, reason="policy-never")


def serialize_interactive(config: RunConfig) -> RunConfig:
    """Force a single worker when each overwrite must be confirmed at the terminal."""
    if config.overwrite_policy == "ask" and config.concurrency > 1:
        return dataclasses.replace(config, concurrency=1)
    return config
