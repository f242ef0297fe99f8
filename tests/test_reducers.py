"""Tests for combine_reducers, create_reducer and on."""

import logging

import pytest
from immutables import Map

from pyredux import (
    Action,
    ActionTypes,
    ReducerError,
    combine_reducers,
    configure,
    create_action,
    create_reducer,
    create_store,
    get_action_type,
    on,
)
from pyredux.actions import init_store, replace_reducer_action

from .conftest import counter, todos


def reducer_a(state=None, action=None):
    return 0 if state is None else state


def reducer_b(state=None, action=None):
    return "" if state is None else state


@pytest.fixture
def combined():
    return combine_reducers({"counter": counter, "todos": todos})


def test_initial_state_collects_slice_defaults():
    combination = combine_reducers({"a": reducer_a, "b": reducer_b})
    assert combination(None, init_store) == {"a": 0, "b": ""}


def test_unchanged_slices_return_same_state_object(combined):
    state = combined(None, init_store)
    assert combined(state, Action("NOOP")) is state


def test_changed_slice_returns_new_state_object(combined):
    state = combined(None, init_store)
    next_state = combined(state, {"type": "INC"})

    assert next_state is not state
    assert next_state == {"counter": 1, "todos": ()}
    assert next_state["todos"] is state["todos"]


def test_extra_keys_count_as_a_change(combined, caplog):
    state = {"counter": 0, "todos": (), "stale": True}

    next_state = combined(state, Action("NOOP"))

    assert next_state is not state
    assert next_state == {"counter": 0, "todos": ()}


def test_immutable_map_state_is_accepted(combined):
    state = Map({"counter": 0, "todos": ()})
    assert combined(state, Action("NOOP")) is state


def test_non_callable_entries_are_ignored(caplog):
    with caplog.at_level(logging.WARNING, logger="pyredux"):
        combination = combine_reducers({"a": reducer_a, "b": "nope", "c": None})

    assert combination(None, init_store) == {"a": 0}
    assert 'No reducer provided for key "c"' in caplog.text
    assert '"b"' not in caplog.text


def test_reducer_returning_none_on_init_raises_on_every_call():
    def broken(state=None, action=None):
        return state

    combination = combine_reducers({"a": reducer_a, "broken": broken})

    with pytest.raises(ReducerError) as first:
        combination(None, init_store)
    with pytest.raises(ReducerError) as second:
        combination({"a": 0}, Action("NOOP"))

    assert first.value is second.value
    assert first.value.reducer_name == "broken"
    assert "during initialization" in str(first.value)


def test_reducer_special_casing_init_fails_the_probe():
    def sneaky(state=None, action=None):
        if get_action_type(action) is ActionTypes.INIT:
            return 0
        return state

    combination = combine_reducers({"sneaky": sneaky})

    with pytest.raises(ReducerError, match="probed with an unknown type"):
        combination(None, init_store)


def test_slice_raising_during_shape_check_fails_on_every_call():
    def picky(state=None, action=None):
        if get_action_type(action) is ActionTypes.PROBE_UNKNOWN_ACTION:
            raise KeyError("unknown action")
        return 0 if state is None else state

    combination = combine_reducers({"picky": picky})

    with pytest.raises(KeyError) as first:
        combination(None, init_store)
    with pytest.raises(KeyError) as second:
        combination({"picky": 0}, Action("NOOP"))
    assert first.value is second.value


def test_slice_returning_none_names_key_and_action_type():
    def clearable(state=None, action=None):
        if get_action_type(action) == "CLEAR":
            return None
        return 0 if state is None else state

    combination = combine_reducers({"clearable": clearable})
    state = combination(None, init_store)

    with pytest.raises(ReducerError) as excinfo:
        combination(state, {"type": "CLEAR"})

    assert excinfo.value.reducer_name == "clearable"
    assert '"CLEAR"' in str(excinfo.value)


def test_slice_returning_none_without_action_type_reports_unknown_type():
    def strict(state=None, action=None):
        if state is not None and get_action_type(action) is None:
            return None
        return 0 if state is None else state

    combination = combine_reducers({"strict": strict})

    with pytest.raises(ReducerError, match=r"\(unknown type\)"):
        combination({"strict": 0}, {"payload": 1})


def test_unexpected_key_warns_once(combined, caplog):
    state = {"counter": 0, "todos": (), "stale": True}

    with caplog.at_level(logging.WARNING, logger="pyredux"):
        combined(state, Action("NOOP"))
        combined(state, Action("NOOP"))

    messages = [r.getMessage() for r in caplog.records if '"stale"' in r.getMessage()]
    assert len(messages) == 1
    assert "previous state received by the reducer" in messages[0]


def test_non_mapping_preloaded_state_warns_and_is_rebuilt(combined, caplog):
    with caplog.at_level(logging.WARNING, logger="pyredux"):
        store = create_store(combined, [1, 2])

    assert store.get_state() == {"counter": 0, "todos": ()}
    assert 'unexpected type of "list"' in caplog.text


def test_unexpected_key_in_preloaded_state_names_create_store(combined, caplog):
    with caplog.at_level(logging.WARNING, logger="pyredux"):
        combined({"counter": 0, "extra": 1}, init_store)

    assert "preloaded_state argument passed to create_store" in caplog.text


def test_replace_action_skips_unexpected_key_warning(combined, caplog):
    state = {"counter": 0, "todos": (), "stale": True}

    with caplog.at_level(logging.WARNING, logger="pyredux"):
        combined(state, replace_reducer_action)
        combined(state, Action("NOOP"))

    assert '"stale"' not in caplog.text


def test_empty_reducer_mapping_warns(caplog):
    combination = combine_reducers({})

    with caplog.at_level(logging.WARNING, logger="pyredux"):
        state = {}
        assert combination(state, init_store) is state

    assert "does not have a valid reducer" in caplog.text


def test_production_mode_skips_advisory_warnings(caplog):
    configure(production=True)

    with caplog.at_level(logging.WARNING, logger="pyredux"):
        combination = combine_reducers({"counter": counter, "missing": None})
        combination({"counter": 0, "stale": True}, Action("NOOP"))

    assert caplog.text == ""


def test_create_reducer_dispatches_by_action_type():
    increment = create_action("[Counter] Increment")
    add = create_action("[Counter] Add", lambda amount: amount)

    reducer = create_reducer(
        0,
        on(increment, lambda state, action: state + 1),
        on(add, lambda state, action: state + action.payload),
        ("[Counter] Reset", lambda state, action: 0),
    )

    state = reducer(None, init_store)
    state = reducer(state, increment())
    state = reducer(state, add(5))
    assert state == 6
    assert reducer(state, {"type": "[Counter] Reset"}) == 0
    assert reducer.initial_state == 0


def test_create_reducer_satisfies_the_combination_shape_check():
    reducer = create_reducer({"items": ()})
    combination = combine_reducers({"list": reducer})

    assert combination(None, init_store) == {"list": {"items": ()}}


def test_create_reducer_rejects_none_initial_state():
    with pytest.raises(ReducerError):
        create_reducer(None)


def test_on_accepts_plain_type_strings():
    handler = on("PING", lambda state, action: state)
    assert list(handler) == ["PING"]
