import asyncio
import logging
from unittest.mock import AsyncMock, patch

import pytest

from talentmatch.utils.exceptions import (
    DatabaseError,
    DimensionMismatch,
    EmptyInput,
    ExceptionContext,
    InvalidArgument,
    NotFound,
    ValidationError,
    map_to_http_exception,
    retry_with_logging,
)


class TestExceptionMapping:
    """Test cases for engine error to HTTP mapping"""

    @pytest.mark.parametrize("exc, status", [
        (InvalidArgument("bad top_n", argument="top_n", value=0), 400),
        (DimensionMismatch("mismatch", left_dim=2, right_dim=3), 400),
        (NotFound("no resume", subject_id="u1"), 404),
        (EmptyInput("no jobs", collection="jobs"), 404),
        (DatabaseError("down", operation="load_jobs"), 500),
    ])
    def test_status_codes(self, exc, status):
        http_exc = map_to_http_exception(exc)
        assert http_exc.status_code == status
        assert http_exc.detail["message"] == exc.message
        assert http_exc.detail["error"]["error_type"] == type(exc).__name__

    def test_to_dict_includes_cause(self):
        exc = DatabaseError("down", cause=RuntimeError("timeout"))
        assert exc.to_dict()["cause"] == "timeout"

    def test_details(self):
        exc = InvalidArgument("bad", argument="top_n", value=-1)
        assert exc.details == {"argument": "top_n", "invalid_value": "-1"}
        assert exc.error_code == "INVALID_ARGUMENT"


class TestExceptionContext:
    def test_wraps_value_errors(self):
        with pytest.raises(ValidationError):
            with ExceptionContext("parse", logging.getLogger("test")):
                raise ValueError("bad value")

    def test_wraps_other_errors_as_database_errors(self):
        with pytest.raises(DatabaseError):
            with ExceptionContext("fetch"):
                raise RuntimeError("socket closed")

    def test_engine_errors_pass_through(self):
        with pytest.raises(NotFound):
            with ExceptionContext("fetch"):
                raise NotFound("missing")


class TestRetry:
    def test_sync_retry_then_success(self):
        attempts = []

        def flaky():
            attempts.append(1)
            if len(attempts) < 2:
                raise RuntimeError("flaky")
            return "ok"

        wrapped = retry_with_logging(max_attempts=3, backoff_factor=0)(flaky)
        assert wrapped() == "ok"
        assert len(attempts) == 2

    def test_async_retry_exhausted(self):
        calls = []

        async def always_fails():
            calls.append(1)
            raise RuntimeError("down")

        wrapped = retry_with_logging(max_attempts=2, backoff_factor=0)(always_fails)
        with patch("talentmatch.utils.exceptions.asyncio.sleep", new_callable=AsyncMock):
            with pytest.raises(RuntimeError):
                asyncio.run(wrapped())
        assert len(calls) == 2
