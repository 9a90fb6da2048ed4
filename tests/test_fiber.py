"""Tests for the generator-backed Fiber primitive."""

import pytest

from cotask import Fiber, FiberError
from tests.helpers import suspending


def test_plain_callable_terminates_inside_start():
    fiber = Fiber(lambda: 42)

    assert not fiber.is_started()
    fiber.start()

    assert fiber.is_started()
    assert fiber.is_terminated()
    assert not fiber.is_suspended()
    assert fiber.get_return() == 42


def test_generator_suspends_at_each_yield():
    fiber = Fiber(suspending(2, "done"))

    fiber.start()
    assert fiber.is_suspended()

    fiber.resume()
    assert fiber.is_suspended()

    fiber.resume()
    assert fiber.is_terminated()
    assert not fiber.failed()
    assert fiber.get_return() == "done"


def test_resume_sends_value_into_body():
    received = []

    def body():
        value = yield
        received.append(value)
        return value * 2

    fiber = Fiber(body)
    fiber.start()
    fiber.resume(21)

    assert received == [21]
    assert fiber.get_return() == 42


def test_nested_generators_suspend_the_whole_stack():
    def inner():
        yield
        return 1

    def outer():
        first = yield from inner()
        second = yield from inner()
        return first + second

    fiber = Fiber(outer)
    fiber.start()
    fiber.resume()
    assert fiber.is_suspended()
    fiber.resume()

    assert fiber.get_return() == 2


def test_starting_twice_is_rejected():
    fiber = Fiber(lambda: None)
    fiber.start()

    with pytest.raises(FiberError, match="already been started"):
        fiber.start()


def test_resume_requires_a_suspended_fiber():
    fiber = Fiber(suspending(1))

    with pytest.raises(FiberError, match="not suspended"):
        fiber.resume()

    fiber.start()
    fiber.resume()

    with pytest.raises(FiberError, match="not suspended"):
        fiber.resume()


def test_body_error_propagates_and_terminates_the_fiber():
    def body():
        yield
        raise ValueError("boom")

    fiber = Fiber(body)
    fiber.start()

    with pytest.raises(ValueError, match="boom"):
        fiber.resume()

    assert fiber.is_terminated()
    assert fiber.failed()
    with pytest.raises(FiberError, match="threw an exception"):
        fiber.get_return()


def test_plain_body_error_propagates_from_start():
    def body():
        raise KeyError("missing")

    fiber = Fiber(body)

    with pytest.raises(KeyError):
        fiber.start()

    assert fiber.failed()
    assert not fiber.is_running()


def test_get_return_before_termination_fails():
    fiber = Fiber(suspending(1))
    fiber.start()

    with pytest.raises(FiberError, match="has not returned"):
        fiber.get_return()


def test_throw_injects_error_at_suspension_point():
    seen = []

    def body():
        try:
            yield
        except LookupError as exc:
            seen.append(exc)
            return "recovered"
        return "not reached"

    fiber = Fiber(body)
    fiber.start()
    error = LookupError("injected")
    fiber.throw(error)

    assert seen == [error]
    assert fiber.get_return() == "recovered"


def test_body_may_ignore_injected_error_and_keep_running():
    def body():
        try:
            yield
        except RuntimeError:
            pass
        yield
        return "ignored"

    fiber = Fiber(body)
    fiber.start()
    fiber.throw(RuntimeError("stop"))

    assert fiber.is_suspended()
    fiber.resume()
    assert fiber.get_return() == "ignored"


def test_uncaught_injected_error_propagates():
    fiber = Fiber(suspending(3))
    fiber.start()

    with pytest.raises(RuntimeError, match="stop"):
        fiber.throw(RuntimeError("stop"))

    assert fiber.failed()


def test_resuming_from_inside_the_body_is_rejected():
    holder = {}

    def body():
        yield
        holder["fiber"].resume()

    fiber = Fiber(body)
    holder["fiber"] = fiber
    fiber.start()

    with pytest.raises(FiberError, match="already running"):
        fiber.resume()

    assert fiber.failed()


def test_body_must_be_callable():
    with pytest.raises(TypeError, match="body must be callable"):
        Fiber("not callable")
