"""
將 action 創建器綁定到 dispatch 的輔助函數。
"""
from collections.abc import Mapping
from typing import Any, Callable, Dict, Union

from .errors import ConfigurationError
from .types import DispatchFunction
from .utils import kind_of


def _bind_action_creator(action_creator: Callable[..., Any], dispatch: DispatchFunction) -> Callable[..., Any]:
    def bound(*args: Any, **kwargs: Any) -> Any:
        return dispatch(action_creator(*args, **kwargs))

    bound.__name__ = getattr(action_creator, "__name__", "bound_action_creator")
    bound.__doc__ = getattr(action_creator, "__doc__", None)
    if hasattr(action_creator, "type"):
        bound.type = action_creator.type  # type: ignore
    return bound


def bind_action_creators(
    action_creators: Union[Callable[..., Any], Mapping],
    dispatch: DispatchFunction,
) -> Union[Callable[..., Any], Dict[str, Callable[..., Any]]]:
    """
    將 action 創建器包裝成呼叫後自動 dispatch 的函數。

    Args:
        action_creators: 單一 action 創建器，或鍵名到 action 創建器的映射。
        dispatch: Store 的 dispatch。

    Returns:
        傳入函數時返回單一包裝函數；傳入映射時返回只包含可呼叫項目的新字典。
    """
    if callable(action_creators):
        return _bind_action_creator(action_creators, dispatch)

    if not isinstance(action_creators, Mapping):
        raise ConfigurationError(
            "bind_action_creators expected a mapping or a function, but instead received: "
            f"'{kind_of(action_creators)}'.",
            component="bind_action_creators",
            received=kind_of(action_creators),
        )

    return {
        key: _bind_action_creator(action_creator, dispatch)
        for key, action_creator in action_creators.items()
        if callable(action_creator)
    }
