"""
PyRedux 錯誤處理模組。

定義所有 PyRedux 異常的層級結構，以及集中式錯誤處理器。
錯誤分為四類：
- ConfigurationError: 建構參數不正確（多個 enhancer、非函數的 reducer 等）
- ActionError: dispatch 了不合法的 action
- StoreError: 在 dispatch 進行中呼叫受限操作（不變式違反）
- ReducerError: reducer 返回了 None（狀態形狀錯誤）
"""
import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger("pyredux.errors")


class PyReduxError(Exception):
    """所有 PyRedux 異常的基礎類。"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        將錯誤轉換為可序列化的字典。

        Returns:
            包含錯誤類型、訊息與細節的字典
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": dict(self.details),
        }

    def __str__(self) -> str:
        return self.message


class ConfigurationError(PyReduxError, TypeError):
    """配置相關的錯誤。"""

    def __init__(self, message: str, component: str, received: Optional[str] = None, **kwargs: Any) -> None:
        details = {"component": component, **kwargs}
        if received is not None:
            details["received"] = received
        super().__init__(message, details)
        self.component = component
        self.received = received


class ActionError(PyReduxError, TypeError):
    """與 Action 相關的錯誤。"""

    def __init__(self, message: str, kind: str, action_type: Any = None, **kwargs: Any) -> None:
        super().__init__(message, {"kind": kind, "action_type": action_type, **kwargs})
        self.kind = kind
        self.action_type = action_type


class StoreError(PyReduxError, RuntimeError):
    """與 Store 相關的錯誤，通常是 dispatch 期間呼叫了受限操作。"""

    def __init__(self, message: str, operation: str, **kwargs: Any) -> None:
        super().__init__(message, {"operation": operation, **kwargs})
        self.operation = operation


class MiddlewareError(StoreError):
    """與 Middleware 相關的錯誤。"""

    def __init__(self, message: str, operation: str = "dispatch", **kwargs: Any) -> None:
        super().__init__(message, operation, **kwargs)


class ReducerError(PyReduxError, ValueError):
    """與 Reducer 相關的錯誤（reducer 返回了 None）。"""

    def __init__(self, message: str, reducer_name: str, action_type: Any = None, **kwargs: Any) -> None:
        super().__init__(message, {"reducer_name": reducer_name, "action_type": action_type, **kwargs})
        self.reducer_name = reducer_name
        self.action_type = action_type


ErrorCallback = Callable[[Exception, Any], None]


class ErrorHandler:
    """集中式錯誤處理器，用於捕獲、日誌記錄和錯誤報告。"""

    def __init__(self, log_to_console: bool = True, log_to_file: bool = False, log_file: Optional[str] = None) -> None:
        self.log_to_console = log_to_console
        self.log_to_file = log_to_file
        self.log_file = log_file
        self.handlers: List[ErrorCallback] = []
        self._file_handler: Optional[logging.Handler] = None

        if self.log_to_file and self.log_file:
            self._file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
            logger.addHandler(self._file_handler)

    def register_handler(self, handler: ErrorCallback) -> None:
        """
        註冊一個錯誤回調，每次 handle 時都會被呼叫。

        Args:
            handler: 接收 (error, action) 的回調函數
        """
        self.handlers.append(handler)

    def unregister_handler(self, handler: ErrorCallback) -> None:
        if handler in self.handlers:
            self.handlers.remove(handler)

    def close(self) -> None:
        """移除並關閉寫入日誌檔的 handler。"""
        if self._file_handler is not None:
            logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None

    def handle(self, error: Exception, action: Any = None) -> None:
        """
        記錄錯誤並通知所有已註冊的回調。

        Args:
            error: 捕獲到的異常
            action: 觸發錯誤的 action（可選）
        """
        if self.log_to_console or self._file_handler is not None:
            if isinstance(error, PyReduxError):
                logger.error("%s: %s %s", error.__class__.__name__, error.message, error.details)
            else:
                logger.error("%s: %s", error.__class__.__name__, error)

        for handler in list(self.handlers):
            handler(error, action)


# 單例錯誤處理器
global_error_handler = ErrorHandler()
