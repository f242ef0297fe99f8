"""
PyRedux 的中介軟體模組。

apply_middleware 將中介軟體串接在 dispatch 外層，產生一個 store enhancer。
此模組也提供常用的中介軟體，用於日誌記錄、thunk、非同步、錯誤回報與歷史記錄。

中介軟體的形式為 api -> next_dispatch -> dispatch：
    def middleware(api):
        def wrap(next_dispatch):
            def dispatch(action):
                return next_dispatch(action)
            return dispatch
        return wrap
"""
import asyncio
import contextlib
import datetime
import inspect
import logging
from typing import Any, Generator, List, Tuple

from .actions import get_action_type
from .compose import compose
from .errors import MiddlewareError, global_error_handler
from .store import EnhancedStore
from .types import (
    ActionContext, DispatchFunction, GetState, Middleware, MiddlewareFunction,
    NextDispatch, StoreCreator, StoreEnhancer,
)

logger = logging.getLogger("pyredux.middleware")


class MiddlewareAPI:
    """
    傳給每個中介軟體的能力物件。

    dispatch 是延遲綁定的：中介軟體可以保存這個物件，
    呼叫時一定會走到最終組合完成的 dispatch。
    """

    __slots__ = ("_get_state", "_dispatch")

    def __init__(self, get_state: GetState, dispatch: DispatchFunction):
        self._get_state = get_state
        self._dispatch = dispatch

    def get_state(self) -> Any:
        return self._get_state()

    def dispatch(self, *args: Any, **kwargs: Any) -> Any:
        return self._dispatch(*args, **kwargs)

    @property
    def state(self) -> Any:
        return self._get_state()


def _dispatch_while_constructing(*args: Any, **kwargs: Any) -> Any:
    raise MiddlewareError(
        "Dispatching while constructing your middleware is not allowed. "
        "Other middleware would not be applied to this dispatch."
    )


def apply_middleware(*middlewares: Any) -> StoreEnhancer:
    """
    建立一個將中介軟體套用到 dispatch 的 store enhancer。

    先傳入的中介軟體位於最外層，最先看到 action。

    Args:
        *middlewares: 中介軟體，可以是類或實例（類會被直接實例化）。

    Returns:
        store enhancer，傳給 create_store 的 enhancer 參數。
    """
    instances: List[Middleware] = [m() if inspect.isclass(m) else m for m in middlewares]

    def enhancer(create_store: StoreCreator) -> StoreCreator:
        def create(reducer: Any, preloaded_state: Any = None) -> EnhancedStore:
            store = create_store(reducer, preloaded_state)
            dispatch: DispatchFunction = _dispatch_while_constructing

            def late_bound_dispatch(*args: Any, **kwargs: Any) -> Any:
                return dispatch(*args, **kwargs)

            api = MiddlewareAPI(store.get_state, late_bound_dispatch)
            chain = [middleware(api) for middleware in instances]
            dispatch = compose(*chain)(store.dispatch)

            return EnhancedStore(store, dispatch)

        return create

    return enhancer


# ———— Base Middleware ————
class BaseMiddleware:
    """
    基礎中介類，以鉤子的方式介入 dispatch。

    子類只需覆寫 on_next、on_complete、on_error 中需要的部分，
    __call__ 會把這些鉤子包裝成標準的中介軟體。
    """

    def __call__(self, api: MiddlewareAPI) -> MiddlewareFunction:
        def middleware(next_dispatch: NextDispatch) -> DispatchFunction:
            def dispatch(action: Any) -> Any:
                with self.action_context(action, api.get_state()) as context:
                    result = next_dispatch(action)
                    context['result'] = result
                    context['next_state'] = api.get_state()
                    return result
            return dispatch
        return middleware

    def on_next(self, action: Any, prev_state: Any) -> None:
        """
        在 action 發送給 reducer 之前調用。

        Args:
            action: 正在 dispatch 的 Action
            prev_state: dispatch 之前的狀態
        """

    def on_complete(self, next_state: Any, action: Any) -> None:
        """
        在 reducer 處理完 action 之後調用。

        Args:
            next_state: dispatch 之後的最新狀態
            action: 剛剛 dispatch 的 Action
        """

    def on_error(self, error: Exception, action: Any) -> None:
        """
        如果 dispatch 過程中拋出異常，則調用此鉤子。異常之後會繼續向上拋出。

        Args:
            error: 拋出的異常
            action: 導致異常的 Action
        """

    def create_context(self, action: Any, prev_state: Any) -> ActionContext:
        return {
            'action': action,
            'prev_state': prev_state,
            'next_state': None,
            'result': None,
            'error': None,
        }

    @contextlib.contextmanager
    def action_context(self, action: Any, prev_state: Any) -> Generator[ActionContext, None, None]:
        """
        以上下文管理器的形式處理一次 dispatch 的生命週期。

        Args:
            action: 要分發的 Action
            prev_state: 分發前的狀態

        Yields:
            上下文字典，dispatch 完成後應填入 next_state 與 result
        """
        context = self.create_context(action, prev_state)
        self.on_next(action, prev_state)
        try:
            yield context
        except Exception as err:
            context['error'] = err
            self.on_error(err, action)
            raise
        if context['next_state'] is not None:
            self.on_complete(context['next_state'], action)


# ———— LoggerMiddleware ————
class LoggerMiddleware(BaseMiddleware):
    """
    日誌中介，記錄每個 action 發送前和發送後的 state。

    使用場景:
    - 偵錯時需要觀察每次 state 的變化。
    - 確保 action 的執行順序正確。
    """

    def __init__(self, level: int = logging.INFO, log: logging.Logger = logger):
        self.level = level
        self.log = log

    def create_context(self, action: Any, prev_state: Any) -> ActionContext:
        context = super().create_context(action, prev_state)
        context['timestamp'] = datetime.datetime.now()
        return context

    def on_next(self, action: Any, prev_state: Any) -> None:
        action_type = get_action_type(action)
        self.log.log(self.level, "dispatching %s", action_type)
        self.log.log(self.level, "state before %s: %r", action_type, prev_state)

    def on_complete(self, next_state: Any, action: Any) -> None:
        self.log.log(self.level, "state after %s: %r", get_action_type(action), next_state)

    def on_error(self, error: Exception, action: Any) -> None:
        self.log.error("error in %s: %s", get_action_type(action), error)


# ———— ThunkMiddleware ————
class ThunkMiddleware:
    """
    支援 dispatch 函數 (thunk)，可以在 thunk 內執行非同步邏輯或多次 dispatch。

    範例:
        ```python
        def fetch_user(user_id):
            def thunk(dispatch, get_state):
                dispatch(request_user(user_id))
                try:
                    user = api.fetch_user(user_id)
                    dispatch(request_user_success(user))
                except ApiError as e:
                    dispatch(request_user_failure(str(e)))
            return thunk

        store.dispatch(fetch_user("user123"))
        ```
    """

    def __call__(self, api: MiddlewareAPI) -> MiddlewareFunction:
        def middleware(next_dispatch: NextDispatch) -> DispatchFunction:
            def dispatch(action: Any) -> Any:
                if callable(action):
                    return action(api.dispatch, api.get_state)
                return next_dispatch(action)
            return dispatch
        return middleware


# ———— AwaitableMiddleware ————
class AwaitableMiddleware:
    """
    支援 dispatch coroutine/future，完成後自動 dispatch 返回值。

    必須在執行中的事件迴圈內 dispatch。返回值為 None 時不會 dispatch。

    範例:
        ```python
        async def fetch_data():
            await asyncio.sleep(1)
            return data_loaded({"result": "success"})

        task = store.dispatch(fetch_data())
        ```
    """

    def __call__(self, api: MiddlewareAPI) -> MiddlewareFunction:
        def on_done(future: "asyncio.Future[Any]") -> None:
            if future.cancelled():
                return
            error = future.exception()
            if error is not None:
                logger.error("awaitable action failed: %s", error, exc_info=error)
                return
            result = future.result()
            if result is not None:
                api.dispatch(result)

        def middleware(next_dispatch: NextDispatch) -> DispatchFunction:
            def dispatch(action: Any) -> Any:
                if asyncio.iscoroutine(action) or asyncio.isfuture(action):
                    task = asyncio.ensure_future(action)
                    task.add_done_callback(on_done)
                    return task
                return next_dispatch(action)
            return dispatch
        return middleware


# ———— ErrorMiddleware ————
class ErrorMiddleware(BaseMiddleware):
    """
    將 dispatch 過程中的異常交給 ErrorHandler 回報，然後繼續拋出。

    使用場景:
    - 當需要統一處理所有異常並記錄或上報時。
    """

    def __init__(self, handler: Any = None):
        self.handler = handler or global_error_handler

    def on_error(self, error: Exception, action: Any) -> None:
        self.handler.handle(error, action)


# ———— DevToolsMiddleware ————
class DevToolsMiddleware(BaseMiddleware):
    """
    記錄每次 action 與 state 快照，支援時間旅行調試。
    """

    def __init__(self) -> None:
        self.history: List[Tuple[Any, Any, Any]] = []
        self._pending: List[Any] = []

    def on_next(self, action: Any, prev_state: Any) -> None:
        self._pending.append(prev_state)

    def on_complete(self, next_state: Any, action: Any) -> None:
        self.history.append((self._pending.pop(), action, next_state))

    def on_error(self, error: Exception, action: Any) -> None:
        self._pending.pop()

    def get_history(self) -> List[Tuple[Any, Any, Any]]:
        """
        返回整個歷史快照列表。

        Returns:
            歷史快照列表，每項為 (prev_state, action, next_state)
        """
        return list(self.history)
