"""Tests for the custom exception hierarchy."""

import pytest
from config.exceptions import (
    LuminaError,
    CompletionError,
    ErrorKind,
    GenerationError,
    AuthError,
    QuotaExceededError,
    TransientError,
    MalformedResponseError,
    ContentTooShortError,
    WorkflowError,
    GenerationCancelledError,
    ArchiveError,
)


class TestExceptionHierarchy:
    def test_all_inherit_from_lumina_error(self):
        leaf_classes = [
            CompletionError,
            GenerationError, AuthError, QuotaExceededError, TransientError,
            MalformedResponseError, ContentTooShortError,
            WorkflowError, GenerationCancelledError,
            ArchiveError,
        ]
        for cls in leaf_classes:
            assert issubclass(cls, LuminaError), f"{cls.__name__} must inherit LuminaError"

    def test_generation_subclasses(self):
        for cls in (AuthError, QuotaExceededError, TransientError, MalformedResponseError, ContentTooShortError):
            assert issubclass(cls, GenerationError)

    def test_completion_error_is_not_classified(self):
        assert not issubclass(CompletionError, GenerationError)


class TestErrorKinds:
    @pytest.mark.parametrize("cls,kind,retryable", [
        (AuthError, ErrorKind.AUTH, False),
        (QuotaExceededError, ErrorKind.QUOTA_EXCEEDED, False),
        (TransientError, ErrorKind.TRANSIENT, True),
        (MalformedResponseError, ErrorKind.MALFORMED_RESPONSE, True),
    ])
    def test_kind_and_retryable(self, cls, kind, retryable):
        err = cls("boom")
        assert err.kind == kind
        assert err.retryable is retryable

    def test_content_too_short_is_retryable(self):
        err = ContentTooShortError(12, 300)
        assert err.kind == ErrorKind.CONTENT_TOO_SHORT
        assert err.retryable is True
        assert err.actual == 12
        assert err.min_chars == 300

    def test_kind_values(self):
        assert ErrorKind.AUTH.value == "AuthError"
        assert ErrorKind.QUOTA_EXCEEDED.value == "QuotaExceeded"


class TestExceptionCreation:
    def test_basic_message(self):
        err = TransientError("network down")
        assert err.message == "network down"
        assert err.details == {}
        assert str(err) == "network down"

    def test_with_details(self):
        err = LuminaError("Failed", {"path": "/tmp/x"})
        assert str(err) == "Failed (path=/tmp/x)"

    def test_completion_error_status_code(self):
        err = CompletionError("Unauthorized", status_code=401)
        assert err.status_code == 401
        assert "status_code=401" in str(err)

    def test_completion_error_without_status_code(self):
        err = CompletionError("boom")
        assert err.status_code is None
        assert str(err) == "boom"

    def test_malformed_response_truncates_raw(self):
        err = MalformedResponseError("bad", raw_response="x" * 500)
        assert err.raw_response == "x" * 500
        assert len(err.details["raw_response"]) == 200

    def test_cancelled_carries_counts(self):
        err = GenerationCancelledError(2, 5)
        assert err.chapters_drafted == 2
        assert err.total == 5
        assert "chapters_drafted=2" in str(err)

    def test_catch_generation_errors_by_base(self):
        with pytest.raises(GenerationError):
            raise QuotaExceededError("quota")
