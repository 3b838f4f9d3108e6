# src/nachamview/models/nacham_record.py

from __future__ import annotations
from dataclasses import dataclass

RECORD_LENGTH = 106
VALID_RECORD_TYPES = frozenset({"1", "5", "6", "7", "8", "9"})


@dataclass(frozen=True)
class NachamRecord:
    """
    NACHAM ファイルの1レコード（106 文字固定長）を表すモデル。

    - index: レコード通し番号（0始まり）
    - raw: 106 文字の生テキスト
    - record_type: レコード種別（先頭1文字。1/5/6/7/8/9）
    """
    index: int
    raw: str

    @property
    def record_type(self) -> str:
        return self.raw[:1]

    @property
    def is_known_type(self) -> bool:
        return self.record_type in VALID_RECORD_TYPES

    def field(self, start: int, end: int) -> str:
        """0始まり・半開区間 [start, end) の切り出し。"""
        return self.raw[start:end]
