"""Tests for translating outcomes into pytest results"""

import pytest

from csrsuite.plugin import check_outcome
from csrsuite.suite import Outcome


def test_passed():
    """Passed outcome does nothing"""
    check_outcome(Outcome.passed(), pytest.skip)


def test_skipped():
    """Skipped outcome skips with its reason"""
    with pytest.raises(pytest.skip.Exception, match="FEATURE_GATE"):
        check_outcome(Outcome.skipped("FEATURE_GATE is not enabled"), pytest.skip)


def test_skipped_enforced():
    """Skipped outcome fails when skips are enforced"""
    with pytest.raises(pytest.fail.Exception, match="FEATURE_GATE"):
        check_outcome(Outcome.skipped("FEATURE_GATE is not enabled"), pytest.fail)


def test_failed():
    """Original error of a failed outcome is raised"""
    error = AssertionError("certificate was not issued")
    with pytest.raises(AssertionError) as exc_info:
        check_outcome(Outcome.failed(error), pytest.skip)
    assert exc_info.value is error


def test_failed_with_cleanup():
    """Both errors are raised together"""
    outcome = Outcome.failed(AssertionError("body"), RuntimeError("cleanup"))
    with pytest.raises(ExceptionGroup) as exc_info:
        check_outcome(outcome, pytest.skip)
    assert exc_info.group_contains(AssertionError)
    assert exc_info.group_contains(RuntimeError)
