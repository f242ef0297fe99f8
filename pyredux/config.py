"""
PyRedux 執行期設定。

`production` 對應開發/正式環境的切換：非正式環境下，
combine_reducers 會對狀態形狀輸出建議性警告。
設定可由環境變數 PYREDUX_ENV、PYREDUX_LOG_LEVEL 提供，
或在程式中透過 configure() 覆寫。
"""
import logging
import os
from typing import Any, Optional

from pydantic import BaseModel, field_validator

ENV_VAR = "PYREDUX_ENV"
LOG_LEVEL_VAR = "PYREDUX_LOG_LEVEL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class PyReduxConfig(BaseModel):
    """PyRedux 的全域設定。"""

    production: bool = False
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {value!r}")
        return level

    @classmethod
    def from_env(cls) -> "PyReduxConfig":
        """
        從環境變數建立設定。

        Returns:
            PYREDUX_ENV 為 "production" 時 production=True 的設定
        """
        data: dict = {"production": os.environ.get(ENV_VAR, "").strip().lower() == "production"}
        level = os.environ.get(LOG_LEVEL_VAR)
        if level:
            data["log_level"] = level
        return cls(**data)


_config: Optional[PyReduxConfig] = None


def _apply(config: PyReduxConfig) -> None:
    logging.getLogger("pyredux").setLevel(config.log_level)


def get_config() -> PyReduxConfig:
    """返回目前生效的設定，首次呼叫時從環境變數載入。"""
    global _config
    if _config is None:
        _config = PyReduxConfig.from_env()
        _apply(_config)
    return _config


def configure(**overrides: Any) -> PyReduxConfig:
    """
    以指定欄位覆寫目前設定。

    Args:
        **overrides: PyReduxConfig 的欄位，例如 production=True

    Returns:
        新的設定
    """
    global _config
    _config = PyReduxConfig(**{**get_config().model_dump(), **overrides})
    _apply(_config)
    return _config


def reset_config() -> PyReduxConfig:
    """丟棄所有覆寫，重新從環境變數載入設定。"""
    global _config
    _config = None
    return get_config()
