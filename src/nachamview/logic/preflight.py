# src/nachamview/logic/preflight.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from nachamview.constants import FILE_SIGNATURE, RETURN_FILE_MARKER
from nachamview.models.nacham_record import RECORD_LENGTH, VALID_RECORD_TYPES

logger = logging.getLogger(__name__)

MSG_NOT_MULTIPLE = f"ファイルの文字数が {RECORD_LENGTH} の倍数ではありません。"
MSG_NO_SIGNATURE = "ファイルヘッダ（種別1）に NACHAM シグネチャがありません。"
MSG_TOO_SHORT = "ファイルが短すぎるためシグネチャを検証できません。"


class PreflightKind(str, Enum):
    PROCEED = "proceed"
    ABORT = "abort"
    BYPASS = "bypass"


@dataclass
class PreflightOutcome:
    kind: PreflightKind
    record_count: int
    global_errors: List[str] = field(default_factory=list)


def is_return_file(text: str) -> bool:
    """
    種別1の [13:23] に返却マーカーがあれば返却（デボルシオン）ファイル。
    """
    if not text.startswith("1"):
        return False
    return RETURN_FILE_MARKER in text[13:23]


def invalid_type_indices(text: str) -> List[int]:
    count = len(text) // RECORD_LENGTH
    return [
        i for i in range(count)
        if text[i * RECORD_LENGTH] not in VALID_RECORD_TYPES
    ]


def run_preflight(text: str) -> PreflightOutcome:
    """
    重い検証の前に行う軽いチェック。

    返却ファイルは他のどのチェックよりも先に判定して BYPASS にする。
    それ以外の3つのチェック（長さ・シグネチャ・種別）はすべて実行し、
    失敗したものを順にまとめて ABORT とする。
    """
    record_count = len(text) // RECORD_LENGTH

    if is_return_file(text):
        logger.info("return file marker found, structural validation skipped")
        return PreflightOutcome(PreflightKind.BYPASS, record_count)

    errors: List[str] = []

    framing_ok = len(text) % RECORD_LENGTH == 0
    if not framing_ok:
        errors.append(MSG_NOT_MULTIPLE)

    if record_count >= 1:
        r0 = text[:RECORD_LENGTH]
        if not (r0[0] == "1" and r0[14:23] == FILE_SIGNATURE):
            errors.append(MSG_NO_SIGNATURE)
    elif framing_ok:
        # 空のテキスト。106未満の端数は上の文字数エラー1件だけにする
        errors.append(MSG_TOO_SHORT)

    bad = invalid_type_indices(text)
    if bad:
        errors.append(f"種別（1桁目）が不正なレコードが {len(bad)} 件あります。")

    if errors:
        logger.warning("preflight failed: %s", " / ".join(errors))
        return PreflightOutcome(PreflightKind.ABORT, record_count, errors)
    return PreflightOutcome(PreflightKind.PROCEED, record_count)
