"""Unit tests for the timing decorator."""

import pytest

from cl_image_tools.utils.profiling import timed


def test_timed_returns_result_and_logs(log_messages: list[str]):
    """Test timed passes the return value through and logs the duration."""

    @timed
    def add(a: int, b: int) -> int:
        return a + b

    assert add(2, 3) == 5
    assert any("[PROFILE]" in m and "add" in m for m in log_messages)


def test_timed_logs_when_function_raises(log_messages: list[str]):
    """Test the duration is logged even when the wrapped call fails."""

    @timed
    def explode() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        explode()

    assert any("[PROFILE]" in m and "explode" in m for m in log_messages)


def test_timed_preserves_metadata():
    """Test functools.wraps keeps the name and docstring."""

    @timed
    def documented() -> None:
        """Docstring."""

    assert documented.__name__ == "documented"
    assert documented.__doc__ == "Docstring."
