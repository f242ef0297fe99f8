"""
PyRedux 的 Action 定義模組。

此模組提供 Action 類別、建立 Action 的工廠函數，
以及框架內部保留的 Action 類型。
Actions 是描述狀態變更意圖的不可變對象，必須帶有非 None 的 type。
"""
import enum
from typing import Any, Callable, Dict, Generic, Optional, Union, overload

from immutables import Map

from .types import P
from .utils import is_plain_object


class ActionTypes(enum.Enum):
    """
    PyRedux 保留的私有 Action 類型。

    枚舉成員不等於任何字串，應用程式的 action type 不可能與之衝突。
    對於未知的 action，reducer 必須返回當前狀態；
    若當前狀態為 None，則必須返回初始狀態。
    不要在 reducer 中特別處理這些類型。
    """

    INIT = "@@pyredux/INIT"
    REPLACE = "@@pyredux/REPLACE"
    PROBE_UNKNOWN_ACTION = "@@pyredux/PROBE_UNKNOWN_ACTION"

    def __repr__(self) -> str:
        return f"ActionTypes.{self.name}"


class Action(Generic[P]):
    """
    表示一個有類型和可選負載的動作。

    泛型參數:
        P: 負載的類型

    屬性:
        type: 動作的類型
        payload: 動作的負載數據（可選）

    也支援唯讀的映射存取（action["type"]、action.get("payload")），
    讓 reducer 可以用同一種寫法處理 dict action 與 Action 實例。
    """
    __slots__ = ('type', 'payload')

    def __init__(self, type: Any, payload: Optional[P] = None):
        super().__setattr__('type', type)
        super().__setattr__('payload', payload)

    def __setattr__(self, name, value):
        if name not in self.__slots__:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")
        if hasattr(self, name):
            raise AttributeError(f"Cannot modify immutable instance attribute '{name}'")
        super().__setattr__(name, value)

    def __getitem__(self, key: str) -> Any:
        if key not in self.__slots__:
            raise KeyError(key)
        return getattr(self, key)

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self.__slots__:
            return default
        return getattr(self, key)

    def __eq__(self, other):
        if not isinstance(other, Action):
            return False
        return self.type == other.type and self.payload == other.payload

    def __hash__(self):
        return hash((self.type, self.payload))

    def __repr__(self):
        return f"Action(type={self.type!r}, payload={self.payload!r})"


def _process_payload(payload: Any) -> Any:
    """將 dict 形式的 payload 轉換為 immutables.Map。"""
    if isinstance(payload, dict):
        return Map(payload)
    return payload


ActionCreator = Callable[..., Action[Any]]


@overload
def create_action(action_type: str) -> ActionCreator: ...


@overload
def create_action(action_type: str, prepare_fn: Callable[..., P]) -> ActionCreator: ...


def create_action(action_type: str, prepare_fn: Optional[Callable[..., Any]] = None) -> ActionCreator:
    """
    創建一個 Action 生成器函數。

    Args:
        action_type: Action 的類型標識符
        prepare_fn: 可選的預處理函數，用於在創建 Action 前處理輸入參數

    Returns:
        一個可調用的函數，用於生成指定類型的 Action

    範例:
        >>> increment = create_action("[Counter] Increment")
        >>> increment()
        Action(type='[Counter] Increment', payload=None)
        >>> add = create_action("[Counter] Add", lambda amount: amount)
        >>> add(5)
        Action(type='[Counter] Add', payload=5)
    """
    def action_creator(*args: Any, **kwargs: Any) -> Action[Any]:
        if prepare_fn:
            return Action(action_type, _process_payload(prepare_fn(*args, **kwargs)))
        if len(args) == 1 and not kwargs:
            return Action(action_type, _process_payload(args[0]))
        if args or kwargs:
            payload: Dict[Union[int, str], Any] = dict(zip(range(len(args)), args))
            payload.update(kwargs)
            return Action(action_type, _process_payload(payload))
        # 無參數，無負載
        return Action(action_type)

    # 添加 type 屬性以便於識別
    action_creator.type = action_type  # type: ignore
    action_creator.__name__ = f"create_{action_type}"
    return action_creator


def is_valid_action(action: Any) -> bool:
    """Action 實例或純資料紀錄（dict / Map）才能被 dispatch。"""
    return isinstance(action, Action) or is_plain_object(action)


def get_action_type(action: Any) -> Any:
    """
    讀取 action 的 type。

    Args:
        action: Action 實例或 dict / Map

    Returns:
        action 的 type，不存在時為 None
    """
    if isinstance(action, Action):
        return action.type
    if is_plain_object(action):
        return action.get("type")
    return getattr(action, "type", None)


# 框架內部使用的 Actions
init_store = Action(ActionTypes.INIT)
replace_reducer_action = Action(ActionTypes.REPLACE)
probe_unknown_action = Action(ActionTypes.PROBE_UNKNOWN_ACTION)
