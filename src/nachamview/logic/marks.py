# src/nachamview/logic/marks.py

from __future__ import annotations

from datetime import date
from typing import List, Optional

from nachamview.constants import IDENTIFIER_ALPHABET
from nachamview.models.validation_result import LineMark, MarkKind


def push_unique(marks: List[LineMark], mark: LineMark) -> None:
    """
    同じ範囲・同じ種類のマークは重複させず、説明文だけマージする。
    既に同じ説明が含まれていれば何もしない。
    """
    for existing in marks:
        if not existing.same_range(mark):
            continue
        if mark.note:
            if not existing.note:
                existing.note = mark.note
            elif mark.note not in existing.note:
                existing.note = f"{existing.note} | {mark.note}"
        return
    marks.append(LineMark(mark.start, mark.end, mark.kind, mark.note))


def has_error(marks: List[LineMark]) -> bool:
    return any(m.kind == MarkKind.ERROR for m in marks)


def parse_digits(s: str) -> Optional[int]:
    """
    数字のみ（前後空白は許す）の文字列を int にする。空白のみは 0。
    符号や数字以外が混じっていれば None。
    """
    t = (s or "").strip()
    if not t:
        return 0
    if not t.isdigit() or not t.isascii():
        return None
    return int(t)


def is_fixed_digits(s: str, width: int) -> bool:
    return len(s) == width and s.isdigit() and s.isascii()


def day_of_year(yyyy: int, mm: int, dd: int) -> Optional[int]:
    """1..365/366 を返す。存在しない日付なら None。"""
    if yyyy < 1900:
        return None
    try:
        d = date(yyyy, mm, dd)
    except ValueError:
        return None
    return d.timetuple().tm_yday


def parse_yyyymmdd(s: str) -> Optional[date]:
    if not is_fixed_digits(s, 8):
        return None
    yyyy, mm, dd = int(s[:4]), int(s[4:6]), int(s[6:8])
    if day_of_year(yyyy, mm, dd) is None:
        return None
    return date(yyyy, mm, dd)


def is_valid_hhmm(s: str) -> bool:
    if not is_fixed_digits(s, 4):
        return False
    return int(s[:2]) < 24 and int(s[2:]) < 60


def ident_from_serial(serial: Optional[str]) -> Optional[str]:
    """
    ファイル名の連番から種別1の識別子を求める。
    例: "007" -> "G"、"027" -> "0"
    """
    if not serial:
        return None
    try:
        n = int(str(serial).strip(), 10)
    except ValueError:
        return None
    idx = (n - 1) % len(IDENTIFIER_ALPHABET)
    return IDENTIFIER_ALPHABET[idx]


def fmt_thousands(v: int) -> str:
    """123456 -> "123,456" """
    return f"{v:,}"


def fmt_cents(cents: int) -> str:
    """センタボ整数を "1234.56" 形式の文字列に"""
    neg = "-" if cents < 0 else ""
    t = str(abs(cents)).rjust(3, "0")
    return f"{neg}{t[:-2]}.{t[-2:]}"


def fmt_money(cents: int) -> str:
    """センタボ整数を "9,999,999.99" 形式の文字列に（表示専用）"""
    neg = "-" if cents < 0 else ""
    whole, frac = divmod(abs(cents), 100)
    return f"{neg}{whole:,}.{frac:02d}"
