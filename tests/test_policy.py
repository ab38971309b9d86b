"""Overwrite decision matrix."""

from __future__ import annotations

from typing import List

import pytest

from blog_summary_writer.summaries.policy import decide_overwrite, serialize_interactive
from blog_summary_writer.summaries.types import RunConfig


@pytest.mark.parametrize("policy", ["ask", "always", "never"])
def test_missing_summary_always_proceeds(policy: str) -> None:
    decision = decide_overwrite(policy, None)  # type: ignore[arg-type]
    assert decision.proceed
    assert decision.reason == "no-existing-summary"


def test_always_overwrites_existing() -> None:
    decision = decide_overwrite("always", "Old。")
    assert decision.proceed
    assert decision.reason == "policy-always"


def test_never_keeps_existing_even_when_empty() -> None:
    decision = decide_overwrite("never", "")
    assert not decision.proceed
    assert decision.reason == "policy-never"


def test_ask_without_confirmer_declines() -> None:
    decision = decide_overwrite("ask", "Old。")
    assert not decision.proceed
    assert decision.reason == "no-interactive-session"


@pytest.mark.parametrize("answer, proceed, reason", [(True, True, "confirmed"), (False, False, "declined")])
def test_ask_uses_confirmer_answer(answer: bool, proceed: bool, reason: str) -> None:
    previews: List[str] = []

    def confirm(preview: str) -> bool:
        previews.append(preview)
        return answer

    decision = decide_overwrite("ask", "Old\nsummary " + "x" * 100, confirm)

    assert decision.proceed is proceed
    assert decision.reason == reason
    assert previews[0].startswith("Old summary x")
    assert previews[0].endswith("…")


def test_confirmer_not_consulted_for_other_policies() -> None:
    def confirm(preview: str) -> bool:
        raise AssertionError("should not be asked")

    assert decide_overwrite("always", "Old", confirm).proceed
    assert not decide_overwrite("never", "Old", confirm).proceed


def test_serialize_interactive_forces_single_worker() -> None:
    assert serialize_interactive(RunConfig(overwrite_policy="ask", concurrency=4)).concurrency == 1
    assert serialize_interactive(RunConfig(overwrite_policy="always", concurrency=4)).concurrency == 4
    config = RunConfig(overwrite_policy="ask", concurrency=1)
    assert serialize_interactive(config) is config
