"""
Reducer 的建立與組合。

- create_reducer / on: 以 action type 對應處理函數的方式建立 reducer
- combine_reducers: 將多個以鍵名區分的 reducer 合併為單一 reducer
"""
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .actions import (
    ActionTypes, get_action_type, init_store, probe_unknown_action,
)
from .config import get_config
from .errors import ReducerError
from .types import ReducerFunction, S
from .utils import is_plain_object, kind_of, warning

Handler = Callable[[Any, Any], Any]


def create_reducer(initial_state: S, *handlers: Union[tuple, Dict[Any, Handler]]) -> ReducerFunction[S]:
    """
    創建一個 reducer 函式，用於處理狀態變更。

    Args:
        initial_state: 初始狀態，不可為 None。
        *handlers: 一系列 (action_type, handler_fn) 元組或使用 on 函式創建的處理器。

    Returns:
        一個 reducer 函式，根據 action 的類型執行對應的處理邏輯。
    """
    if initial_state is None:
        raise ReducerError(
            "The initial state passed to create_reducer may not be None.",
            reducer_name="create_reducer",
        )

    action_handlers: Dict[Any, Handler] = {}  # 儲存 action 類型與處理函式的對應關係

    for handler in handlers:
        if isinstance(handler, tuple) and len(handler) == 2:
            action_type, handler_fn = handler
            action_handlers[action_type] = handler_fn
        else:
            action_handlers.update(handler)

    def reducer(state: Optional[S] = None, action: Any = None) -> S:
        if state is None:
            state = initial_state
        if action is None:
            return state

        handler = action_handlers.get(get_action_type(action))
        if handler:
            return handler(state, action)
        return state  # 沒有對應處理函式，返回原狀態

    reducer.initial_state = initial_state  # type: ignore
    reducer.handlers = action_handlers  # type: ignore
    return reducer


def on(action_creator_or_type: Any, handler: Handler) -> Dict[Any, Handler]:
    """
    創建一個 action 類型與處理函式的映射。

    Args:
        action_creator_or_type: Action 創建器函式或 Action 類型字串。
        handler: 處理該 Action 的函式，接收 (state, action) 並返回新狀態。

    Returns:
        一個包含 {action_type: handler} 的字典。
    """
    if callable(action_creator_or_type) and hasattr(action_creator_or_type, 'type'):
        action_type = action_creator_or_type.type
    else:
        action_type = str(action_creator_or_type)

    return {action_type: handler}


def _unexpected_state_shape_message(
    input_state: Any,
    reducers: Mapping[str, ReducerFunction[Any]],
    action: Any,
    unexpected_key_cache: Dict[str, bool],
) -> Optional[str]:
    reducer_keys = list(reducers)
    action_type = get_action_type(action)
    argument_name = (
        "preloaded_state argument passed to create_store"
        if action_type is ActionTypes.INIT
        else "previous state received by the reducer"
    )

    if not reducer_keys:
        return (
            "Store does not have a valid reducer. Make sure the argument passed "
            "to combine_reducers is a mapping whose values are reducers."
        )

    if not is_plain_object(input_state):
        return (
            f'The {argument_name} has unexpected type of "{kind_of(input_state)}". '
            f'Expected argument to be a mapping with the following keys: "{", ".join(reducer_keys)}"'
        )

    unexpected_keys = [
        key for key in input_state.keys()
        if key not in reducers and not unexpected_key_cache.get(key)
    ]
    for key in unexpected_keys:
        unexpected_key_cache[key] = True

    # replace_reducer 觸發的 action 不輸出警告
    if action_type is ActionTypes.REPLACE:
        return None

    if unexpected_keys:
        return (
            f"Unexpected {'keys' if len(unexpected_keys) > 1 else 'key'} "
            f'"{", ".join(map(str, unexpected_keys))}" found in {argument_name}. '
            f'Expected to find one of the known reducer keys instead: '
            f'"{", ".join(reducer_keys)}". Unexpected keys will be ignored.'
        )
    return None


def _assert_reducer_shape(reducers: Mapping[str, ReducerFunction[Any]]) -> None:
    for key, reducer in reducers.items():
        if reducer(None, init_store) is None:
            raise ReducerError(
                f'The slice reducer for key "{key}" returned None during initialization. '
                "If the state passed to the reducer is None, you must explicitly return "
                "the initial state. The initial state may not be None.",
                reducer_name=key,
                action_type=ActionTypes.INIT,
            )

        if reducer(None, probe_unknown_action) is None:
            raise ReducerError(
                f'The slice reducer for key "{key}" returned None when probed with an unknown type. '
                f"Don't try to handle {ActionTypes.INIT!r} or other ActionTypes members. "
                "They are considered private. Instead, you must return the current state "
                "for any unknown actions, unless it is None, in which case you must return "
                "the initial state, regardless of the action type.",
                reducer_name=key,
                action_type=ActionTypes.PROBE_UNKNOWN_ACTION,
            )


def combine_reducers(reducers: Mapping[str, Any]) -> ReducerFunction[Dict[str, Any]]:
    """
    將多個 reducer 合併為單一 reducer。

    合併後的 reducer 以各鍵名對應的子狀態呼叫子 reducer，
    收集結果為新的字典。若所有子狀態都與先前相同（is 比較）且鍵數不變，
    則返回原本的 state 物件。

    Args:
        reducers: 鍵名到 reducer 的映射，值不是函數的鍵會被忽略。

    Returns:
        合併後的 reducer。若子 reducer 的形狀檢查失敗，
        每次呼叫都會拋出同一個異常。
    """
    production = get_config().production
    final_reducers: Dict[str, ReducerFunction[Any]] = {}

    for key, reducer in reducers.items():
        if not production and reducer is None:
            warning(f'No reducer provided for key "{key}"')

        if callable(reducer):
            final_reducers[key] = reducer

    final_keys: List[str] = list(final_reducers)
    unexpected_key_cache: Optional[Dict[str, bool]] = None if production else {}

    shape_assertion_error: Optional[Exception] = None
    try:
        _assert_reducer_shape(final_reducers)
    except Exception as err:
        shape_assertion_error = err

    def combination(state: Optional[Mapping[str, Any]] = None, action: Any = None) -> Dict[str, Any]:
        if shape_assertion_error is not None:
            raise shape_assertion_error

        if state is None:
            state = {}

        if unexpected_key_cache is not None:
            message = _unexpected_state_shape_message(state, final_reducers, action, unexpected_key_cache)
            if message:
                warning(message)

        is_mapping = is_plain_object(state)
        has_changed = False
        next_state: Dict[str, Any] = {}
        for key in final_keys:
            previous_for_key = state.get(key) if is_mapping else None
            next_for_key = final_reducers[key](previous_for_key, action)
            if next_for_key is None:
                action_type = get_action_type(action)
                described = f'"{action_type}"' if action_type is not None else "(unknown type)"
                raise ReducerError(
                    f'When called with an action of type {described}, the slice reducer for key "{key}" '
                    "returned None. To ignore an action, you must explicitly return the previous state.",
                    reducer_name=key,
                    action_type=action_type,
                )
            next_state[key] = next_for_key
            has_changed = has_changed or next_for_key is not previous_for_key

        has_changed = has_changed or not is_mapping or len(final_keys) != len(state)
        return next_state if has_changed else state

    return combination
