"""
PyRedux: 可預測的狀態容器。

單一狀態只能透過純函數 reducer 更新，並提供訂閱通知與中介軟體擴充點。
"""
from .errors import (
    PyReduxError, ActionError, ReducerError, StoreError, MiddlewareError,
    ConfigurationError, ErrorHandler, global_error_handler,
)
from .config import PyReduxConfig, configure, get_config, reset_config
from .actions import Action, ActionTypes, create_action, get_action_type
from .compose import compose
from .reducers import combine_reducers, create_reducer, on
from .store import Store, EnhancedStore, StoreObservable, Subscription, create_store
from .middleware import (
    MiddlewareAPI, apply_middleware, BaseMiddleware, LoggerMiddleware,
    ThunkMiddleware, AwaitableMiddleware, ErrorMiddleware, DevToolsMiddleware,
)
from .bind import bind_action_creators
from .utils import is_plain_object, kind_of, warning

__version__ = "0.1.0"

# 匯出所有公開 API
__all__ = [
    # Errors
    "PyReduxError", "ActionError", "ReducerError", "StoreError", "MiddlewareError",
    "ConfigurationError", "ErrorHandler", "global_error_handler",

    # Config
    "PyReduxConfig", "configure", "get_config", "reset_config",

    # Actions
    "Action", "ActionTypes", "create_action", "get_action_type",

    # Reducers
    "compose", "combine_reducers", "create_reducer", "on",

    # Store
    "Store", "EnhancedStore", "StoreObservable", "Subscription", "create_store",

    # Middleware
    "MiddlewareAPI", "apply_middleware", "BaseMiddleware", "LoggerMiddleware",
    "ThunkMiddleware", "AwaitableMiddleware", "ErrorMiddleware", "DevToolsMiddleware",

    # Helpers
    "bind_action_creators", "is_plain_object", "kind_of", "warning",
]
