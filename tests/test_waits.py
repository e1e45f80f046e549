# tests/test_waits.py
"""
Tests for wait utilities.
"""

import time

import pytest

from uiauto_finders import by
from uiauto_finders.exceptions import ElementNotFoundError, TimeoutError
from uiauto_finders.snapshot import TreeElement
from uiauto_finders.waits import wait_until, wait_until_not, wait_until_passes


class TestWaitUntil:
    """Tests for wait_until function."""

    def test_returns_truthy_value(self):
        """Should return the truthy value from predicate."""
        assert wait_until(lambda: "hello", timeout=5) == "hello"

    def test_runs_at_least_once_with_zero_timeout(self):
        """A zero timeout still evaluates the predicate once."""
        assert wait_until(lambda: True, timeout=0) is True

    def test_waits_for_condition(self):
        """Should wait until condition becomes true."""
        start = time.time()
        counter = {"value": 0}

        def predicate():
            counter["value"] += 1
            return counter["value"] >= 3

        result = wait_until(predicate, timeout=5, interval=0.1)
        elapsed = time.time() - start

        assert result is True
        assert elapsed >= 0.2
        assert elapsed < 1.5

    def test_timeout_raises_error(self):
        """Should raise TimeoutError when timeout expires."""
        with pytest.raises(TimeoutError) as exc_info:
            wait_until(lambda: False, timeout=0.3, interval=0.1, description="ready flag")

        assert "Timed out waiting for ready flag" in str(exc_info.value)
        assert exc_info.value.timeout == 0.3
        assert exc_info.value.last_error is None

    def test_preserves_exception(self):
        """Should preserve the last exception in TimeoutError."""
        def failing_predicate():
            raise ValueError("test error")

        with pytest.raises(TimeoutError) as exc_info:
            wait_until(failing_predicate, timeout=0.3, interval=0.1)

        assert isinstance(exc_info.value.last_error, ValueError)
        assert "test error" in str(exc_info.value.last_error)


class TestWaitUntilPasses:
    """Tests for wait_until_passes function."""

    def test_retries_find_until_element_appears(self):
        """Should retry a whole find() while it raises ElementNotFoundError."""
        finder = by.name("OK")
        roots = [TreeElement({"name": "Main"}), TreeElement({"name": "Main"})]
        roots.append(TreeElement({"name": "Main"}, children=[TreeElement({"name": "OK"})]))
        attempts = {"value": 0}

        def find_once():
            root = roots[min(attempts["value"], len(roots) - 1)]
            attempts["value"] += 1
            return finder.find(root)

        result = wait_until_passes(
            find_once,
            timeout=5,
            interval=0.05,
            exceptions=(ElementNotFoundError,),
            description="OK button",
        )

        assert str(result) == "Element{name='OK'}"
        assert attempts["value"] == 3

    def test_timeout_with_exception_info(self):
        """Should include exception info in TimeoutError."""
        finder = by.name("missing")

        with pytest.raises(TimeoutError) as exc_info:
            wait_until_passes(
                finder.find,
                0.3,
                0.1,
                (ElementNotFoundError,),
                "missing element",
                TreeElement({"name": "Main"}),
            )

        error = exc_info.value
        assert isinstance(error.last_error, ElementNotFoundError)
        assert error.last_error.finder is finder
        assert error.attempts >= 1
        assert "missing element" in str(error)
        assert error.__cause__ is error.last_error

    def test_with_args_and_kwargs(self):
        """Should pass args and kwargs to function."""
        def add(a, b, multiplier=1):
            return (a + b) * multiplier

        result = wait_until_passes(add, timeout=5, description="addition", a=2, b=3, multiplier=2)

        assert result == 10

    def test_only_catches_specified_exceptions(self):
        """Should only catch specified exception types."""
        def raises_type_error():
            raise TypeError("wrong type")

        with pytest.raises(TypeError):
            wait_until_passes(
                raises_type_error,
                timeout=1,
                exceptions=(ElementNotFoundError,),
                description="test",
            )


class TestWaitUntilNot:
    """Tests for wait_until_not function."""

    def test_returns_when_falsy(self):
        """Should return when predicate becomes falsy."""
        counter = {"value": 3}

        def predicate():
            counter["value"] -= 1
            return counter["value"] > 0

        wait_until_not(predicate, timeout=5, interval=0.05)
        assert counter["value"] == 0

    def test_exception_counts_as_gone(self):
        """A raising predicate ends the wait."""
        def predicate():
            raise ElementNotFoundError(by.name("x"))

        wait_until_not(predicate, timeout=1)

    def test_timeout_when_always_truthy(self):
        """Should timeout when predicate stays truthy."""
        with pytest.raises(TimeoutError) as exc_info:
            wait_until_not(lambda: True, timeout=0.3, interval=0.1)
        assert "kept returning truthy" in str(exc_info.value)


class TestTimeoutErrorAttributes:
    """Tests for TimeoutError attributes."""

    def test_root_cause_unwraps_nested_timeouts(self):
        """Should reach the innermost error through wrapped timeouts."""
        finder = by.name("OK")
        inner = ElementNotFoundError(finder)
        middle = TimeoutError("inner timeout", last_error=inner)
        error = TimeoutError("outer error", last_error=middle)

        assert error.root_cause is inner
        assert error.finder is finder

    def test_no_finder_without_not_found_cause(self):
        assert TimeoutError("plain", last_error=ValueError("x")).finder is None
        assert TimeoutError("plain").root_cause is None

    def test_str_includes_details(self):
        error = TimeoutError("timeout", attempts=4, elapsed=1.234)
        assert str(error) == "timeout [attempts=4, elapsed=1.23s]"


class TestWaitGoneExceptions:
    """Tests for the exceptions filter of wait_until_not."""

    def test_unlisted_exception_propagates(self):
        """Only listed exceptions count as gone."""
        def predicate():
            raise OSError("snapshot unreadable")

        with pytest.raises(OSError):
            wait_until_not(predicate, timeout=1, exceptions=(ElementNotFoundError,))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
