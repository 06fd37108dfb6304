"""Tests for the failure taxonomy."""

from __future__ import annotations

from pvectl.domain.errors import (
    DownstreamError,
    FailureKind,
    FieldIssue,
    PermissionDeniedError,
    UnknownCommandError,
    ValidationFailure,
    classify,
)


class TestClassify:
    def test_each_kind(self) -> None:
        assert classify(UnknownCommandError("x")) is FailureKind.UNKNOWN_COMMAND
        assert classify(ValidationFailure([])) is FailureKind.VALIDATION
        assert classify(PermissionDeniedError("Create Pool")) is FailureKind.PERMISSION_DENIED
        assert classify(DownstreamError("boom")) is FailureKind.DOWNSTREAM

    def test_unclassified_exception_is_downstream(self) -> None:
        assert classify(RuntimeError("timeout")) is FailureKind.DOWNSTREAM


class TestMessages:
    def test_unknown_command_names_the_command(self) -> None:
        err = UnknownCommandError("does_not_exist")
        assert err.name == "does_not_exist"
        assert '"does_not_exist"' in str(err)

    def test_permission_denied_names_the_action(self) -> None:
        err = PermissionDeniedError("Delete Pool")
        assert str(err) == "Permission denied: Delete Pool requires elevated permissions"

    def test_validation_failure_keeps_every_issue(self) -> None:
        issues = [FieldIssue("poolid", "Field required"), FieldIssue("comment", "bad")]
        err = ValidationFailure(issues)
        assert err.fields == ["poolid", "comment"]
        assert str(err) == "poolid: Field required; comment: bad"

    def test_field_issue_str(self) -> None:
        assert str(FieldIssue("node", "too long")) == "node: too long"
