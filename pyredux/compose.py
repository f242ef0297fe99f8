"""
函數組合工具。

compose 由右至左串接函數，apply_middleware 以它組合中介軟體鏈。
"""
import functools
from typing import Any, Callable


def _identity(arg: Any) -> Any:
    return arg


def compose(*funcs: Callable[..., Any]) -> Callable[..., Any]:
    """
    由右至左組合多個函數。

    最右側的函數可接收任意參數，其餘函數只接收前一個函數的返回值。
    compose(f, g, h) 等價於 lambda *args, **kwargs: f(g(h(*args, **kwargs)))。

    Args:
        *funcs: 要組合的函數

    Returns:
        組合後的函數；沒有函數時返回恆等函數，只有一個時原樣返回
    """
    if not funcs:
        return _identity

    if len(funcs) == 1:
        return funcs[0]

    return functools.reduce(
        lambda a, b: lambda *args, **kwargs: a(b(*args, **kwargs)),
        funcs,
    )
