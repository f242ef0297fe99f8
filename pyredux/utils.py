"""
錯誤訊息與形狀檢查用的輔助函數。
"""
import asyncio
import functools
import inspect
import logging
from typing import Any

from immutables import Map

logger = logging.getLogger("pyredux")

# 視為「純資料紀錄」的型別，子類別不算
_PLAIN_TYPES = (dict, Map)


def kind_of(value: Any) -> str:
    """
    返回值的簡短類型描述，只用於組合錯誤訊息。

    Args:
        value: 任意值

    Returns:
        例如 "None"、"function"、"list"、"Map"
    """
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "bool"
    if inspect.isclass(value):
        return "class"
    if inspect.iscoroutine(value):
        return "coroutine"
    if asyncio.isfuture(value):
        return "Future"
    if inspect.isroutine(value) or isinstance(value, functools.partial):
        return "function"
    if isinstance(value, Map):
        return "Map"
    return type(value).__name__


def is_plain_object(value: Any) -> bool:
    """判斷值是否為 dict 或 immutables.Map 本身（不含子類別）。"""
    return type(value) in _PLAIN_TYPES


def warning(message: str) -> None:
    """輸出非致命的警告，永遠不會拋出異常。"""
    logger.warning(message)
