# src/nachamview/config.py
"""
検証オプションとログ設定。

オプションの優先順位（高い順）:
1. 環境変数 NACHAM_*
2. 設定ファイル（JSON）
3. ValidationOptions の既定値
"""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)

# UI から渡される camelCase キー → ValidationOptions のフィールド名
_CAMEL_KEYS: Dict[str, str] = {
    "checkTransCount": "check_trans_count",
    "checkDebitos": "check_debits",
    "checkCreditos": "check_credits",
    "checkTotalesControl": "check_control_totals",
    "includeAdendasInTrans": "include_addenda_in_trans",
    "serialFromName": "serial_from_name",
}

_ENV_KEYS: Dict[str, str] = {
    "NACHAM_CHECK_TRANS_COUNT": "check_trans_count",
    "NACHAM_CHECK_DEBITS": "check_debits",
    "NACHAM_CHECK_CREDITS": "check_credits",
    "NACHAM_CHECK_CONTROL_TOTALS": "check_control_totals",
    "NACHAM_INCLUDE_ADDENDA_IN_TRANS": "include_addenda_in_trans",
    "NACHAM_SERIAL_FROM_NAME": "serial_from_name",
}


@dataclass(frozen=True)
class ValidationOptions:
    """
    検証エンジンのオプション。既定値ではすべてのチェックを行う。
    """
    check_trans_count: bool = True
    check_debits: bool = True
    check_credits: bool = True
    check_control_totals: bool = True
    include_addenda_in_trans: bool = True
    serial_from_name: str = ""

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ValidationOptions":
        """
        snake_case / camelCase どちらのキーも受け付ける。未知のキーは無視。
        """
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in known or value is None:
                continue
            if name == "serial_from_name":
                values[name] = str(value)
            else:
                values[name] = _to_bool(value)
        return cls(**values)

    def merged(self, **overrides: Any) -> "ValidationOptions":
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def load_validation_options(
    config_file: Optional[Union[str, Path]] = None,
) -> ValidationOptions:
    """
    既定値 → JSON ファイル → 環境変数 の順に重ねてオプションを作る。
    JSON が壊れている場合はログに残して既定値のまま続行する。
    """
    data: Dict[str, Any] = {}

    if config_file:
        path = Path(config_file)
        if not path.exists():
            logger.warning("Config file not found: %s", path)
        else:
            try:
                with path.open("r", encoding="utf-8") as f:
                    file_config = json.load(f)
                if isinstance(file_config, dict):
                    data.update(file_config)
                    logger.info("Loaded validation options from: %s", path)
                else:
                    logger.error("Config file %s must contain a JSON object", path)
            except json.JSONDecodeError as e:
                logger.error("Invalid JSON in config file %s: %s", path, e)

    for env_var, key in _ENV_KEYS.items():
        value = os.getenv(env_var)
        if value is not None:
            data[key] = value
            logger.debug("Option from env %s: %s = %s", env_var, key, value)

    return ValidationOptions.from_mapping(data)


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    simple_format: bool = False,
) -> logging.Logger:
    """
    nachamview パッケージのロガーを設定する。

    - level: logging.DEBUG など
    - log_file: 指定があれば UTF-8 でファイルにも出力
    - simple_format: True ならメッセージのみ（GUI 表示向け）
    """
    pkg_logger = logging.getLogger("nachamview")

    if simple_format:
        formatter = logging.Formatter("%(message)s")
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    pkg_logger.handlers.clear()
    pkg_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    pkg_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        pkg_logger.addHandler(file_handler)

    pkg_logger.propagate = False
    return pkg_logger
