from unittest import mock

import pytest

from epidemic_sim.common import Issue, IssueSeverity, Lazy, count_warnings, exit_if_issues, log_issue


def test_lazy_never_evaluated():
    evals = []
    Lazy(lambda: evals.append(1))

    assert evals == []


def test_lazy_evaluates_on_str():
    evals = []
    lazy = Lazy(lambda: (evals.append(1), "hi"))

    assert str(lazy) == str((None, "hi"))
    assert evals == [1]


def test_lazy_evaluates_on_repr():
    evals = []
    lazy = Lazy(lambda: (evals.append(1), "hi"))

    assert repr(lazy) == repr((None, "hi"))
    assert evals == [1]


def test_log_low_issue():
    logger = mock.MagicMock()
    issues = []
    log_issue(logger, "hi", IssueSeverity.LOW, issues)

    assert issues == [Issue(description="hi", severity=1)]
    logger.info.assert_called_once_with("hi")


def test_log_medium_issue():
    logger = mock.MagicMock()
    issues = []
    log_issue(logger, "hi", IssueSeverity.MEDIUM, issues)

    assert issues == [Issue(description="hi", severity=5)]
    logger.warning.assert_called_once_with("hi")


def test_log_high_issue():
    logger = mock.MagicMock()
    issues = []
    log_issue(logger, "hi", IssueSeverity.HIGH, issues)

    assert issues == [Issue(description="hi", severity=10)]
    logger.error.assert_called_once_with("hi")


def test_log_issue_returns_same_list():
    issues = [Issue(description="old", severity=1)]

    assert log_issue(mock.MagicMock(), "new", IssueSeverity.LOW, issues) is issues
    assert len(issues) == 2


def test_count_warnings_ignores_low_issues():
    issues = [
        Issue(description="a", severity=IssueSeverity.LOW.value),
        Issue(description="b", severity=IssueSeverity.MEDIUM.value),
        Issue(description="c", severity=IssueSeverity.HIGH.value),
    ]

    assert count_warnings(issues) == 2


def test_exit_if_issues_no_warnings():
    exit_if_issues([Issue(description="a", severity=IssueSeverity.LOW.value)], "bad")


def test_exit_if_issues_with_warnings():
    with pytest.raises(SystemExit) as e:
        exit_if_issues([Issue(description="a", severity=IssueSeverity.MEDIUM.value)], "bad")

    assert e.value.code == 1
