"""
PyRedux 範例：待辦事項應用，展示內建中介軟體的使用
"""
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import asyncio
import logging
import uuid
from typing import Optional, Tuple
from typing_extensions import TypedDict

from pyredux import (
    AwaitableMiddleware,
    DevToolsMiddleware,
    ErrorMiddleware,
    LoggerMiddleware,
    ThunkMiddleware,
    apply_middleware,
    configure,
    create_action,
    create_reducer,
    create_store,
    on,
)


# ====== 1. 定義狀態模型 ======
class TodoItem(TypedDict):
    id: str
    text: str
    completed: bool


class TodoState(TypedDict):
    todos: Tuple[TodoItem, ...]
    loading: bool
    error: Optional[str]


todo_initial_state = TodoState(todos=(), loading=False, error=None)


# ====== 2. 定義 Actions ======
add_todo = create_action("[Todo] Add", lambda text: {"id": uuid.uuid4().hex, "text": text, "completed": False})
toggle_todo = create_action("[Todo] Toggle", lambda todo_id: todo_id)
load_todos_request = create_action("[Todo] Load Request")
load_todos_success = create_action("[Todo] Load Success", lambda texts: tuple(texts))


# ====== 3. 定義 Reducer ======
def _add(state: TodoState, action) -> TodoState:
    return {**state, "todos": state["todos"] + (dict(action.payload),)}


def _toggle(state: TodoState, action) -> TodoState:
    todos = tuple(
        {**todo, "completed": not todo["completed"]} if todo["id"] == action.payload else todo
        for todo in state["todos"]
    )
    return {**state, "todos": todos}


def _loaded(state: TodoState, action) -> TodoState:
    todos = tuple({"id": uuid.uuid4().hex, "text": text, "completed": False} for text in action.payload)
    return {**state, "todos": state["todos"] + todos, "loading": False}


todo_reducer = create_reducer(
    todo_initial_state,
    on(add_todo, _add),
    on(toggle_todo, _toggle),
    on(load_todos_request, lambda state, action: {**state, "loading": True}),
    on(load_todos_success, _loaded),
)


# ====== 4. Thunk 與非同步 Action ======
def add_and_toggle(text: str):
    def thunk(dispatch, get_state):
        action = dispatch(add_todo(text))
        dispatch(toggle_todo(action.payload["id"]))
    return thunk


async def fetch_todos():
    await asyncio.sleep(0.1)
    return load_todos_success(["買牛奶", "寫報告"])


async def main() -> None:
    devtools = DevToolsMiddleware()
    store = create_store(
        todo_reducer,
        apply_middleware(LoggerMiddleware, ErrorMiddleware, ThunkMiddleware, AwaitableMiddleware, devtools),
    )
    store.subscribe(lambda: print(f"待辦數量: {len(store.state['todos'])}"))

    store.dispatch(add_todo("學習 PyRedux"))
    store.dispatch(add_and_toggle("完成範例"))

    store.dispatch(load_todos_request())
    await store.dispatch(fetch_todos())
    await asyncio.sleep(0)

    print("\n==== 歷史記錄 ====")
    for prev_state, action, next_state in devtools.get_history():
        print(f"{action.type}: {len(prev_state['todos'])} -> {len(next_state['todos'])}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    configure(log_level="INFO")
    asyncio.run(main())
