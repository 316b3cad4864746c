"""Translates case outcomes into pytest results"""

from typing import Callable

from csrsuite.suite import Outcome, Status


def check_outcome(outcome: Outcome, skip_or_fail: Callable[[str], None]):
    """Skips, fails or passes the current pytest test based on the outcome of a case"""
    if outcome.status == Status.SKIPPED:
        skip_or_fail(outcome.reason)
    elif outcome.status == Status.FAILED:
        raise outcome.error
