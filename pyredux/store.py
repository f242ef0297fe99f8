"""
PyRedux Store 模組。

Store 持有單一狀態，只能透過 dispatch 經由 reducer 更新；
訂閱者在每次 dispatch 後被同步通知。
"""
from typing import Any, Callable, Generic, List, Optional

import reactivex
from reactivex import Observable, operators as ops
from reactivex.disposable import Disposable

from .actions import get_action_type, init_store, is_valid_action, replace_reducer_action
from .errors import ActionError, ConfigurationError, StoreError
from .types import Listener, Observer, ReducerFunction, S, StateSelector, StoreEnhancer, Unsubscribe
from .utils import kind_of


class Subscription:
    """StoreObservable.subscribe 返回的訂閱物件。"""

    __slots__ = ("unsubscribe",)

    def __init__(self, unsubscribe: Unsubscribe):
        self.unsubscribe = unsubscribe


class StoreObservable:
    """
    Store 狀態的最小可觀察介面。

    訂閱時立即推送一次當前狀態，之後每次 dispatch 都推送新狀態。
    """

    def __init__(self, store: "Store[Any]"):
        self._store = store

    def subscribe(self, observer: Observer) -> Subscription:
        """
        訂閱狀態變化。

        Args:
            observer: 具有 next(state) 方法的物件

        Returns:
            帶有 unsubscribe() 的 Subscription
        """
        if observer is None or not callable(getattr(observer, "next", None)):
            raise ConfigurationError(
                f"Expected the observer to be an object with a 'next' method. "
                f"Instead, received: '{kind_of(observer)}'",
                component="observable",
                received=kind_of(observer),
            )

        def observe_state() -> None:
            observer.next(self._store.get_state())

        observe_state()
        return Subscription(self._store.subscribe(observe_state))


class Store(Generic[S]):
    """
    狀態容器，管理應用狀態並通知訂閱者狀態變更。

    內部狀態只能透過 dispatch / replace_reducer 修改。
    同一時間只允許一個 dispatch 在執行中，reducer 執行期間呼叫
    get_state、subscribe、unsubscribe 或 dispatch 都會拋出 StoreError。
    """

    def __init__(self, reducer: ReducerFunction[S], preloaded_state: Optional[S] = None):
        """
        初始化 Store。一般應透過 create_store 建立。

        Args:
            reducer: 根 reducer
            preloaded_state: 初始狀態，None 表示交由 reducer 決定
        """
        if not callable(reducer):
            raise ConfigurationError(
                f"Expected the root reducer to be a function. Instead, received: '{kind_of(reducer)}'",
                component="reducer",
                received=kind_of(reducer),
            )

        self._reducer = reducer
        self._state = preloaded_state
        # 通知時使用的快照，與可修改的工作清單
        self._current_listeners: Optional[List[Listener]] = []
        self._next_listeners: List[Listener] = self._current_listeners
        self._is_dispatching = False

    def _ensure_can_mutate_next_listeners(self) -> None:
        # 工作清單仍與快照為同一個 list 時才複製
        if self._next_listeners is self._current_listeners:
            self._next_listeners = list(self._next_listeners)

    def get_state(self) -> S:
        """
        獲取當前狀態。

        Returns:
            當前狀態。
        """
        if self._is_dispatching:
            raise StoreError(
                "You may not call store.get_state() while the reducer is executing. "
                "The reducer has already received the state as an argument. "
                "Pass it down from the top reducer instead of reading it from the store.",
                operation="get_state",
            )
        return self._state

    @property
    def state(self) -> S:
        """當前狀態的快照，等同 get_state()。"""
        return self.get_state()

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """
        註冊一個在每次 dispatch 後被呼叫的無參數回調。

        在通知過程中新增或移除訂閱，只影響下一次 dispatch。

        Args:
            listener: 無參數的回調函數

        Returns:
            取消訂閱的函數，重複呼叫不會有效果
        """
        if not callable(listener):
            raise ConfigurationError(
                f"Expected the listener to be a function. Instead, received: '{kind_of(listener)}'",
                component="listener",
                received=kind_of(listener),
            )

        if self._is_dispatching:
            raise StoreError(
                "You may not call store.subscribe() while the reducer is executing. "
                "If you would like to be notified after the store has been updated, "
                "subscribe from outside and call store.get_state() in the callback.",
                operation="subscribe",
            )

        is_subscribed = True
        self._ensure_can_mutate_next_listeners()
        self._next_listeners.append(listener)

        def unsubscribe() -> None:
            nonlocal is_subscribed
            if not is_subscribed:
                return

            if self._is_dispatching:
                raise StoreError(
                    "You may not unsubscribe from a store listener while the reducer is executing.",
                    operation="unsubscribe",
                )

            is_subscribed = False
            self._ensure_can_mutate_next_listeners()
            for index, registered in enumerate(self._next_listeners):
                if registered is listener:
                    del self._next_listeners[index]
                    break
            self._current_listeners = None

        return unsubscribe

    def dispatch(self, action: Any) -> Any:
        """
        分發一個動作，觸發狀態更新。

        Args:
            action: Action 實例或帶有 "type" 的 dict / Map

        Returns:
            傳入的 action。
        """
        if not is_valid_action(action):
            kind = kind_of(action)
            raise ActionError(
                f"Actions must be Action instances or plain dicts. Instead, the actual type was: '{kind}'. "
                "You may need to add middleware to your store setup to handle dispatching other values, "
                "such as ThunkMiddleware to handle dispatching functions or AwaitableMiddleware "
                "to handle dispatching coroutines.",
                kind=kind,
            )

        if get_action_type(action) is None:
            raise ActionError(
                'Actions may not have a None "type". You may have misspelled an action type constant.',
                kind=kind_of(action),
            )

        if self._is_dispatching:
            raise StoreError("Reducers may not dispatch actions.", operation="dispatch")

        try:
            self._is_dispatching = True
            self._state = self._reducer(self._state, action)
        finally:
            self._is_dispatching = False

        listeners = self._current_listeners = self._next_listeners
        for listener in listeners:
            listener()

        return action

    def replace_reducer(self, next_reducer: ReducerFunction[S]) -> None:
        """
        替換 Store 目前使用的 reducer，並以 REPLACE action 重新計算狀態。

        Args:
            next_reducer: 新的 reducer
        """
        if not callable(next_reducer):
            raise ConfigurationError(
                f"Expected the next_reducer to be a function. Instead, received: '{kind_of(next_reducer)}'",
                component="reducer",
                received=kind_of(next_reducer),
            )

        self._reducer = next_reducer
        self.dispatch(replace_reducer_action)

    def observable(self) -> StoreObservable:
        """返回最小的可觀察介面。"""
        return StoreObservable(self)

    def _state_changes(self, observer, scheduler=None) -> Disposable:
        last = [self.get_state()]

        def listener() -> None:
            previous, last[0] = last[0], self.get_state()
            observer.on_next((previous, last[0]))

        # 先送出訂閱當下的狀態，作為之後比較的基準
        observer.on_next((last[0], last[0]))
        return Disposable(self.subscribe(listener))

    def select(self, selector: Optional[StateSelector] = None) -> Observable:
        """
        選擇狀態的一部分進行觀察。

        Args:
            selector: 一個函數，接收整個狀態並返回希望觀察的部分。

        Returns:
            一個可觀察對象，發送 (舊值, 新值)，只有新值變化時才發出。
        """
        select_fn = selector or (lambda state: state)

        return reactivex.create(self._state_changes).pipe(
            ops.map(lambda pair: (select_fn(pair[0]), select_fn(pair[1]))),
            ops.distinct_until_changed(lambda pair: pair[1]),
            ops.skip(1),
        )


class EnhancedStore(Generic[S]):
    """
    由 enhancer 產生的 Store：dispatch 被替換，其餘操作委派給底層 Store。
    """

    def __init__(self, store: Any, dispatch: Callable[[Any], Any]):
        self._store = store
        self.dispatch = dispatch

    def __getattr__(self, name: str) -> Any:
        if name == "_store":
            raise AttributeError(name)
        return getattr(self._store, name)

    @property
    def state(self) -> S:
        return self._store.get_state()

    def __repr__(self) -> str:
        return f"EnhancedStore({self._store!r})"


def create_store(
    reducer: ReducerFunction[S],
    preloaded_state: Any = None,
    enhancer: Optional[StoreEnhancer] = None,
    *extra: Any,
) -> Store[S]:
    """
    創建一個新的 Store。

    Args:
        reducer: 根 reducer，給定當前狀態與 action 返回下一個狀態。
        preloaded_state: 初始狀態。若為函數且未提供 enhancer，則視為 enhancer。
        enhancer: 可選的 store enhancer，例如 apply_middleware(...) 的結果。

    Returns:
        Store: 新創建的 Store 實例（若有 enhancer，則為其返回的 Store）。
    """
    if (callable(preloaded_state) and callable(enhancer)) or (
        callable(enhancer) and extra and callable(extra[0])
    ):
        raise ConfigurationError(
            "It looks like you are passing several store enhancers to create_store(). "
            "This is not supported. Instead, compose them together to a single function.",
            component="enhancer",
        )

    if callable(preloaded_state) and enhancer is None:
        enhancer = preloaded_state
        preloaded_state = None

    if enhancer is not None:
        if not callable(enhancer):
            raise ConfigurationError(
                f"Expected the enhancer to be a function. Instead, received: '{kind_of(enhancer)}'",
                component="enhancer",
                received=kind_of(enhancer),
            )
        return enhancer(create_store)(reducer, preloaded_state)

    store = Store(reducer, preloaded_state)
    # 初始化狀態，讓 reducer 建立真正的初始值
    store.dispatch(init_store)
    return store
