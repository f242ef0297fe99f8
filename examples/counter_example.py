"""
PyRedux 範例：計數器與待辦事項，展示 combine_reducers、select 與 bind_action_creators
"""
import json
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from typing import Optional, Tuple
from typing_extensions import TypedDict

from pyredux import (
    bind_action_creators, combine_reducers, create_action, create_reducer, create_store, on,
)


# ====== 1. 定義狀態 ======
class CounterState(TypedDict):
    count: int
    last_updated: Optional[str]


counter_initial_state = CounterState(count=0, last_updated=None)


# ====== 2. 定義 Actions ======
increment = create_action("[Counter] Increment")
decrement = create_action("[Counter] Decrement")
increment_by = create_action("[Counter] Increment By", lambda amount: amount)
reset = create_action("[Counter] Reset", lambda value: value)
add_todo = create_action("[Todo] Add", lambda text: text)


# ====== 3. 定義 Reducers ======
counter_reducer = create_reducer(
    counter_initial_state,
    on(increment, lambda state, action: {**state, "count": state["count"] + 1}),
    on(decrement, lambda state, action: {**state, "count": state["count"] - 1}),
    on(increment_by, lambda state, action: {**state, "count": state["count"] + action.payload}),
    on(reset, lambda state, action: {**state, "count": action.payload}),
)


def todos_reducer(state: Optional[Tuple[str, ...]] = None, action=None) -> Tuple[str, ...]:
    if state is None:
        state = ()
    if action is not None and action.get("type") == add_todo.type:
        return state + (action["payload"],)
    return state


root_reducer = combine_reducers({"counter": counter_reducer, "todos": todos_reducer})
store = create_store(root_reducer)


if __name__ == "__main__":
    # 訂閱狀態變化
    store.select(lambda state: state["counter"]["count"]).subscribe(
        on_next=lambda t: print(f"計數變化: {t[0]} -> {t[1]}")
    )
    store.select(lambda state: state["todos"]).subscribe(
        on_next=lambda t: print(f"待辦事項更新: {json.dumps(t[1], ensure_ascii=False)}")
    )

    actions = bind_action_creators(
        {"increment": increment, "increment_by": increment_by, "reset": reset, "add_todo": add_todo},
        store.dispatch,
    )

    print("\n==== 開始測試基本操作 ====")
    actions["increment"]()
    actions["increment_by"](5)
    store.dispatch(decrement())
    actions["reset"](10)
    actions["add_todo"]("寫測試")

    print("\n==== 最終狀態 ====")
    print(store.state)
