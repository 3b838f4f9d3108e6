# src/nachamview/models/validation_result.py

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class MarkKind(str, Enum):
    ERROR = "error"
    OK = "ok"
    INFO = "info"


class LineStatus(str, Enum):
    OK = "ok"
    ERROR = "error"


@dataclass
class LineMark:
    """
    1レコード内の文字範囲に対する診断マーク。

    - start / end: 0始まり・半開区間の桁位置（0〜106）
    - kind: error / ok / info
    - note: ビューアのツールチップに出す説明文
    """
    start: int
    end: int
    kind: MarkKind
    note: Optional[str] = None

    def same_range(self, other: "LineMark") -> bool:
        return (
            self.start == other.start
            and self.end == other.end
            and self.kind == other.kind
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"start": self.start, "end": self.end, "type": self.kind.value}
        if self.note:
            d["note"] = self.note
        return d


@dataclass
class ValidationResult:
    """
    検証エンジンの最終結果。ビューアは読み取り専用で扱う。
    """
    line_status: List[Optional[LineStatus]]
    line_reason: List[Optional[str]]
    global_errors: List[str]
    line_marks: List[List[LineMark]]
    is_return_file: bool = False
    trailer_index: Optional[int] = None

    @classmethod
    def empty(cls, record_count: int) -> "ValidationResult":
        return cls(
            line_status=[None] * record_count,
            line_reason=[None] * record_count,
            global_errors=[],
            line_marks=[[] for _ in range(record_count)],
        )

    @classmethod
    def aborted(cls, record_count: int, global_errors: List[str]) -> "ValidationResult":
        """プリフライト失敗時の空の結果（ステータス・マークなし）"""
        result = cls.empty(record_count)
        result.global_errors = list(global_errors)
        return result

    @classmethod
    def return_file(cls, record_count: int) -> "ValidationResult":
        """返却（デボルシオン）ファイル: 構造検証は行わない"""
        result = cls.empty(record_count)
        result.is_return_file = True
        return result

    @property
    def record_count(self) -> int:
        return len(self.line_status)

    @property
    def error_line_count(self) -> int:
        return sum(1 for s in self.line_status if s == LineStatus.ERROR)

    @property
    def is_valid(self) -> bool:
        """
        エクスポート可否の判定に使う集約値。

        返却ファイルなら常に True。それ以外は
        グローバルエラーなし・エラー行なし・トレーラが ok のとき True。
        """
        if self.is_return_file:
            return True
        if self.global_errors:
            return False
        if self.error_line_count:
            return False
        if self.trailer_index is None:
            return False
        return self.line_status[self.trailer_index] == LineStatus.OK

    def marks_of_kind(self, index: int, kind: MarkKind) -> List[LineMark]:
        return [m for m in self.line_marks[index] if m.kind == kind]

    def to_dict(self) -> Dict[str, Any]:
        """ワーカーの done メッセージと同じ形の dict を返す。"""
        return {
            "lineStatus": [s.value if s is not None else None for s in self.line_status],
            "lineReason": list(self.line_reason),
            "globalErrors": list(self.global_errors),
            "lineMarks": [[m.to_dict() for m in marks] for marks in self.line_marks],
            "isDevolucion": self.is_return_file,
        }
