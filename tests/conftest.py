# tests/conftest.py
import pytest

from pyredux import create_action, create_store, get_action_type, reset_config
from pyredux.config import ENV_VAR, LOG_LEVEL_VAR

increment = create_action("INC")
add_todo = create_action("ADD_TODO", lambda text: text)


def counter(state=None, action=None):
    if state is None:
        state = 0
    if get_action_type(action) == "INC":
        return state + 1
    return state


def todos(state=None, action=None):
    if state is None:
        state = ()
    if get_action_type(action) == "ADD_TODO":
        return state + (action["payload"],)
    return state


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    # 每個測試都從非 production 的預設設定開始
    monkeypatch.delenv(ENV_VAR, raising=False)
    monkeypatch.delenv(LOG_LEVEL_VAR, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def counter_reducer():
    return counter


@pytest.fixture
def todos_reducer():
    return todos


@pytest.fixture
def store():
    # Fresh store per test
    return create_store(counter)
