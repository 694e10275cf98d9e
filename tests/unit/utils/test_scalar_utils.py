"""Unit tests for scalar type resolution and driver value coercion."""

from decimal import Decimal

import pytest

from ai_token_store.constants import ScalarType
from ai_token_store.exceptions import ErrorCode, UnsupportedTypeError
from ai_token_store.utils.scalar_utils import (
    INT32_MAX,
    INT64_MAX,
    coerce_scalar,
    resolve_scalar_type,
)


class TestResolveScalarType:
    @pytest.mark.parametrize(
        "requested, expected",
        [
            (ScalarType.TEXT, ScalarType.TEXT),
            ("int32", ScalarType.INT32),
            ("INT64", ScalarType.INT64),
            ("Float64", ScalarType.FLOAT64),
            (str, ScalarType.TEXT),
            (int, ScalarType.INT64),
            (float, ScalarType.FLOAT64),
            (bool, ScalarType.BOOL),
        ],
    )
    def test_supported(self, requested, expected):
        assert resolve_scalar_type(requested) is expected

    @pytest.mark.parametrize("requested", ["decimal", "string", Decimal, bytes, dict, None, 1.5])
    def test_unsupported(self, requested):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            resolve_scalar_type(requested)

        assert exc_info.value.error_code == ErrorCode.UNSUPPORTED_TYPE
        assert "Unsupported return type" in exc_info.value.message
        assert exc_info.value.context["requested_type"] == repr(requested)


class TestCoerceScalar:
    """Each requested type accepts one family of driver values."""

    @pytest.mark.parametrize("scalar_type", list(ScalarType))
    def test_null_stays_none(self, scalar_type):
        assert coerce_scalar(None, scalar_type) is None

    def test_text(self):
        assert coerce_scalar("openai", ScalarType.TEXT) == "openai"

    @pytest.mark.parametrize("value", [7, 2.5, b"bytes", True])
    def test_text_rejects_non_strings(self, value):
        with pytest.raises(TypeError):
            coerce_scalar(value, ScalarType.TEXT)

    @pytest.mark.parametrize(
        "value, expected",
        [(42, 42), (Decimal("42"), 42), (42.0, 42), (True, 1), (INT32_MAX, INT32_MAX)],
    )
    def test_int32_accepts_integral_values(self, value, expected):
        result = coerce_scalar(value, ScalarType.INT32)

        assert result == expected
        assert type(result) is int

    @pytest.mark.parametrize("value", [INT32_MAX + 1, -(2**31) - 1])
    def test_int32_range(self, value):
        with pytest.raises(ValueError):
            coerce_scalar(value, ScalarType.INT32)

    def test_int64_range(self):
        assert coerce_scalar(INT64_MAX, ScalarType.INT64) == INT64_MAX
        with pytest.raises(ValueError):
            coerce_scalar(INT64_MAX + 1, ScalarType.INT64)

    @pytest.mark.parametrize("value", [2.5, Decimal("0.1"), float("nan"), float("inf")])
    def test_integer_rejects_lossy_values(self, value):
        with pytest.raises(ValueError):
            coerce_scalar(value, ScalarType.INT64)

    def test_integer_rejects_text(self):
        with pytest.raises(TypeError):
            coerce_scalar("42", ScalarType.INT64)

    @pytest.mark.parametrize("value, expected", [(2.5, 2.5), (3, 3.0), (Decimal("1.25"), 1.25)])
    def test_float64(self, value, expected):
        result = coerce_scalar(value, ScalarType.FLOAT64)

        assert result == expected
        assert isinstance(result, float)

    @pytest.mark.parametrize("value", [True, "2.5"])
    def test_float64_rejects(self, value):
        with pytest.raises(TypeError):
            coerce_scalar(value, ScalarType.FLOAT64)

    @pytest.mark.parametrize("value, expected", [(True, True), (False, False), (1, True), (0, False)])
    def test_bool(self, value, expected):
        assert coerce_scalar(value, ScalarType.BOOL) is expected

    @pytest.mark.parametrize("value", [2, -1, "true", 1.0])
    def test_bool_rejects(self, value):
        with pytest.raises(TypeError):
            coerce_scalar(value, ScalarType.BOOL)
