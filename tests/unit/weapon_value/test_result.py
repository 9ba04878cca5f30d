"""Tests for the Result type (Ok/Err pattern) and failure tags."""

import pytest

from weapon_value.result import (
    Err,
    EvaluationFailure,
    FailureReason,
    Ok,
    failure,
)


class TestOk:
    """Tests for Ok result type."""

    def test_is_ok_returns_true(self):
        result = Ok(42)
        assert result.is_ok() is True
        assert result.is_err() is False

    def test_unwrap_returns_value(self):
        assert Ok("hello").unwrap() == "hello"

    def test_unwrap_or_returns_value(self):
        """Ok.unwrap_or() ignores the default."""
        assert Ok(42).unwrap_or(0) == 42

    def test_map_transforms_value(self):
        mapped = Ok(5).map(lambda x: x * 2)
        assert isinstance(mapped, Ok)
        assert mapped.unwrap() == 10

    def test_and_then_can_return_err(self):
        """Ok.and_then() can return Err from the chained function."""
        chained = Ok(-5).and_then(
            lambda x: Ok(x) if x > 0 else failure(FailureReason.MISSING_DATA, "negative")
        )
        assert chained.is_err()
        assert chained.reason is FailureReason.MISSING_DATA

    def test_error_and_reason_are_none(self):
        result = Ok(42)
        assert result.error is None
        assert result.reason is None

    def test_repr(self):
        assert repr(Ok(42)) == "Ok(42)"

    def test_ok_with_none_value(self):
        """Ok can contain None as a valid value."""
        result = Ok(None)
        assert result.is_ok()
        assert result.unwrap() is None


class TestErr:
    """Tests for Err result type."""

    def test_is_err_returns_true(self):
        result = Err("boom")
        assert result.is_err() is True
        assert result.is_ok() is False

    def test_unwrap_raises_value_error(self):
        with pytest.raises(ValueError, match="unwrap on Err"):
            Err("boom").unwrap()

    def test_unwrap_or_returns_default(self):
        assert Err("boom").unwrap_or(7) == 7

    def test_map_and_and_then_are_no_ops(self):
        result = Err("boom")
        assert result.map(lambda x: x * 2) is result
        assert result.and_then(lambda x: Ok(x)) is result

    def test_value_is_none(self):
        assert Err("boom").value is None

    def test_reason_from_plain_error_is_none(self):
        """Only EvaluationFailure errors carry a reason tag."""
        assert Err("boom").reason is None


class TestFailure:
    """Tests for failure() and EvaluationFailure."""

    def test_failure_builds_tagged_err(self):
        result = failure(FailureReason.INCONSISTENT_MODIFIERS, "scale is zero")

        assert isinstance(result, Err)
        assert result.reason is FailureReason.INCONSISTENT_MODIFIERS
        assert result.error == EvaluationFailure(
            FailureReason.INCONSISTENT_MODIFIERS, "scale is zero"
        )

    def test_str_includes_reason_tag(self):
        error = EvaluationFailure(FailureReason.NO_RUNE_SOCKETS, "no sockets")
        assert str(error) == "no_rune_sockets: no sockets"

    @pytest.mark.parametrize(
        "reason,value",
        [
            (FailureReason.MISSING_DATA, "missing_data"),
            (FailureReason.INCONSISTENT_MODIFIERS, "inconsistent_modifiers"),
            (FailureReason.NO_RUNE_SOCKETS, "no_rune_sockets"),
        ],
    )
    def test_reason_values(self, reason, value):
        assert reason.value == value
