"""
PyRedux 的共用型別定義。

集中定義 reducer、dispatch、middleware 與 enhancer 的函數簽名，
以及 Store 與 Observer 的結構化協定，供其他模組引用。
"""
from typing import Any, Callable, Optional, TypeVar

from typing_extensions import Protocol, TypedDict, runtime_checkable


S = TypeVar("S")  # 狀態類型
P = TypeVar("P")  # 負載類型
T = TypeVar("T")

# ———— 函數簽名 ————
ReducerFunction = Callable[[Optional[S], Any], S]
DispatchFunction = Callable[[Any], Any]
NextDispatch = Callable[[Any], Any]
GetState = Callable[[], Any]
Listener = Callable[[], None]
Unsubscribe = Callable[[], None]
StateSelector = Callable[[Any], Any]
ThunkFunction = Callable[[DispatchFunction, GetState], Any]


@runtime_checkable
class StoreLike(Protocol):
    """Store 對外暴露的最小能力集合。"""

    def dispatch(self, action: Any) -> Any: ...

    def get_state(self) -> Any: ...

    def subscribe(self, listener: Listener) -> Unsubscribe: ...

    def replace_reducer(self, next_reducer: ReducerFunction[Any]) -> None: ...


# 建立 Store 的能力：(reducer, preloaded_state) -> Store
StoreCreator = Callable[..., StoreLike]
# Enhancer 接收一個 StoreCreator，返回增強後的 StoreCreator
StoreEnhancer = Callable[[StoreCreator], StoreCreator]


class MiddlewareAPILike(Protocol):
    """傳給 middleware 的能力物件。"""

    def get_state(self) -> Any: ...

    def dispatch(self, action: Any) -> Any: ...


MiddlewareFunction = Callable[[NextDispatch], DispatchFunction]
Middleware = Callable[[MiddlewareAPILike], MiddlewareFunction]


@runtime_checkable
class Observer(Protocol):
    """最小 observer 協定，只需實作 next。"""

    def next(self, state: Any) -> None: ...


class ActionContext(TypedDict, total=False):
    """Hook 型 middleware 在一次 dispatch 期間共享的上下文。"""

    action: Any
    prev_state: Any
    next_state: Any
    result: Any
    error: Optional[Exception]
    timestamp: Any
