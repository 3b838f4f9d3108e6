# src/nachamview/code_tables.py

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, FrozenSet, Optional, Tuple

# dataフォルダ内のファイル名対応表
_TABLE_FILES: Dict[str, str] = {
    "transaction_code_rules": "transaction_code_rules.json",
}

DEFAULT_ADDENDA_TYPES: FrozenSet[str] = frozenset({"05"})


@dataclass(frozen=True)
class TransactionCodeRule:
    """
    ロット（種別5）の 種類 + クラス + 説明 から、
    種別6で許される取引コード集合を決めるルール1件。

    空文字列のマッチ条件は「何でもよい」を意味する。
    """
    service_type: str
    class_code: str
    description_prefix: str
    allowed_codes: FrozenSet[str]
    addenda_types: FrozenSet[str] = DEFAULT_ADDENDA_TYPES
    unique_invoice_ref: bool = False
    label: str = ""

    def matches(self, service_type: str, class_code: str, description: str) -> bool:
        if self.service_type and self.service_type != service_type.strip():
            return False
        if self.class_code and self.class_code != class_code.strip():
            return False
        if self.description_prefix and not description.strip().startswith(self.description_prefix):
            return False
        return True

    @classmethod
    def from_dict(cls, item: Dict[str, Any]) -> "TransactionCodeRule":
        addenda = item.get("addenda_types") or sorted(DEFAULT_ADDENDA_TYPES)
        return cls(
            service_type=str(item.get("service_type", "")),
            class_code=str(item.get("class_code", "")),
            description_prefix=str(item.get("description_prefix", "")),
            allowed_codes=frozenset(str(c) for c in item.get("allowed_codes", [])),
            addenda_types=frozenset(str(c) for c in addenda),
            unique_invoice_ref=bool(item.get("unique_invoice_ref", False)),
            label=str(item.get("label", "")),
        )


@lru_cache(maxsize=None)
def load_code_table(table_name: str) -> Dict[str, Any]:
    """
    コード表の JSON を読み込んで dict のまま返す。

    - table_name: "transaction_code_rules" など
    - JSON は nachamview/data/ 以下に配置する
    """
    if table_name not in _TABLE_FILES:
        raise KeyError(f"Unknown table name: {table_name}")

    filename = _TABLE_FILES[table_name]

    with resources.files("nachamview.data").joinpath(filename).open(
        "r", encoding="utf-8"
    ) as f:
        raw = json.load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"Unsupported JSON format in {filename} (expected dict)")
    return raw


@lru_cache(maxsize=None)
def transaction_code_rules() -> Tuple[TransactionCodeRule, ...]:
    """
    ルールを JSON の記述順（＝優先順）で返す。
    """
    raw = load_code_table("transaction_code_rules")
    items = raw.get("rules", [])
    if not isinstance(items, list):
        raise ValueError("transaction_code_rules.json: 'rules' must be a list")
    return tuple(TransactionCodeRule.from_dict(item) for item in items)


@lru_cache(maxsize=None)
def debit_transaction_codes() -> FrozenSet[str]:
    """借方（出金）として集計する取引コード"""
    raw = load_code_table("transaction_code_rules")
    return frozenset(str(c) for c in raw.get("debit_transaction_codes", []))


def match_transaction_rule(
    service_type: str,
    class_code: str,
    description: str,
    rules: Optional[Tuple[TransactionCodeRule, ...]] = None,
) -> Optional[TransactionCodeRule]:
    """
    最初に一致したルールを返す。どれにも一致しなければ None（制限なし）。
    """
    if rules is None:
        rules = transaction_code_rules()
    for rule in rules:
        if rule.matches(service_type, class_code, description):
            return rule
    return None


def is_debit_code(code: str) -> bool:
    if code is None:
        return False
    return str(code).strip() in debit_transaction_codes()
