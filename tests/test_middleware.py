"""Tests for apply_middleware and the bundled middleware."""

import asyncio
import logging

import pytest

from pyredux import (
    Action,
    ActionError,
    AwaitableMiddleware,
    BaseMiddleware,
    DevToolsMiddleware,
    EnhancedStore,
    ErrorHandler,
    ErrorMiddleware,
    LoggerMiddleware,
    MiddlewareError,
    ThunkMiddleware,
    apply_middleware,
    create_store,
    get_action_type,
)

from .conftest import counter, increment


def recording(name, calls):
    def middleware(api):
        def wrap(next_dispatch):
            def dispatch(action):
                calls.append(f"{name} in")
                result = next_dispatch(action)
                calls.append(f"{name} out")
                return result
            return dispatch
        return wrap
    return middleware


def test_first_middleware_is_outermost():
    calls = []

    def reducer(state=None, action=None):
        if get_action_type(action) == "GO":
            calls.append("reducer")
        return counter(state, action)

    store = create_store(reducer, apply_middleware(recording("A", calls), recording("B", calls)))
    store.dispatch({"type": "GO"})

    assert calls == ["A in", "B in", "reducer", "B out", "A out"]


def test_enhanced_store_delegates_everything_but_dispatch():
    store = create_store(counter, apply_middleware())
    notified = []
    store.subscribe(lambda: notified.append(store.get_state()))

    store.dispatch(increment())
    store.replace_reducer(counter)

    assert isinstance(store, EnhancedStore)
    assert store.state == 1
    assert notified == [1, 1]


def test_middleware_api_dispatch_is_late_bound():
    calls = []

    def doubler(api):
        def wrap(next_dispatch):
            def dispatch(action):
                if get_action_type(action) == "DOUBLE":
                    api.dispatch(increment())
                    return api.dispatch(increment())
                return next_dispatch(action)
            return dispatch
        return wrap

    store = create_store(counter, apply_middleware(doubler, recording("log", calls)))
    store.dispatch({"type": "DOUBLE"})

    assert store.get_state() == 2
    assert calls == ["log in", "log out", "log in", "log out"]


def test_middleware_api_exposes_state():
    seen = []

    def spy(api):
        def wrap(next_dispatch):
            def dispatch(action):
                seen.append((api.get_state(), api.state))
                return next_dispatch(action)
            return dispatch
        return wrap

    store = create_store(counter, 4, apply_middleware(spy))
    store.dispatch(increment())

    assert seen == [(4, 4)]


def test_dispatch_during_middleware_construction_is_rejected():
    def eager(api):
        api.dispatch(increment())
        return lambda next_dispatch: next_dispatch

    with pytest.raises(MiddlewareError, match="while constructing your middleware"):
        create_store(counter, apply_middleware(eager))


def test_thunk_middleware_class_is_instantiated():
    store = create_store(counter, apply_middleware(ThunkMiddleware))

    def add_two(dispatch, get_state):
        dispatch(increment())
        dispatch(increment())
        return get_state()

    assert store.dispatch(add_two) == 2
    assert store.get_state() == 2


def test_functions_need_thunk_middleware(store):
    with pytest.raises(ActionError):
        store.dispatch(lambda dispatch, get_state: None)


def test_awaitable_middleware_dispatches_coroutine_result():
    async def scenario():
        store = create_store(counter, apply_middleware(AwaitableMiddleware()))

        async def load():
            await asyncio.sleep(0)
            return Action("INC")

        task = store.dispatch(load())
        await task
        await asyncio.sleep(0)
        return store.get_state()

    assert asyncio.run(scenario()) == 1


def test_awaitable_middleware_ignores_none_results():
    async def scenario():
        store = create_store(counter, apply_middleware(AwaitableMiddleware()))

        async def fire_and_forget():
            return None

        await store.dispatch(fire_and_forget())
        await asyncio.sleep(0)
        return store.get_state()

    assert asyncio.run(scenario()) == 0


def test_logger_middleware_logs_before_and_after(caplog):
    store = create_store(counter, apply_middleware(LoggerMiddleware))

    with caplog.at_level(logging.INFO, logger="pyredux.middleware"):
        store.dispatch(increment())

    assert "dispatching INC" in caplog.text
    assert "state before INC: 0" in caplog.text
    assert "state after INC: 1" in caplog.text


def test_error_middleware_reports_and_reraises():
    reported = []
    handler = ErrorHandler(log_to_console=False)
    handler.register_handler(lambda error, action: reported.append((error, action)))

    def reducer(state=None, action=None):
        if get_action_type(action) == "BOOM":
            raise ValueError("boom")
        return counter(state, action)

    store = create_store(reducer, apply_middleware(ErrorMiddleware(handler)))
    action = {"type": "BOOM"}

    with pytest.raises(ValueError):
        store.dispatch(action)

    assert len(reported) == 1
    assert isinstance(reported[0][0], ValueError)
    assert reported[0][1] is action


def test_devtools_middleware_records_history():
    devtools = DevToolsMiddleware()
    store = create_store(counter, apply_middleware(devtools))

    first, second = increment(), increment()
    store.dispatch(first)
    store.dispatch(second)

    assert devtools.get_history() == [(0, first, 1), (1, second, 2)]


def test_base_middleware_hooks_run_in_order():
    events = []

    class Hooks(BaseMiddleware):
        def on_next(self, action, prev_state):
            events.append(("next", prev_state))

        def on_complete(self, next_state, action):
            events.append(("complete", next_state))

        def on_error(self, error, action):
            events.append(("error", str(error)))

    def reducer(state=None, action=None):
        if get_action_type(action) == "BOOM":
            raise RuntimeError("bad")
        return counter(state, action)

    store = create_store(reducer, apply_middleware(Hooks))
    store.dispatch(increment())
    with pytest.raises(RuntimeError):
        store.dispatch({"type": "BOOM"})

    assert events == [("next", 0), ("complete", 1), ("next", 1), ("error", "bad")]
