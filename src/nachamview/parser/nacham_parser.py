# src/nachamview/parser/nacham_parser.py
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

import chardet

from nachamview.models.nacham_record import RECORD_LENGTH, NachamRecord

logger = logging.getLogger(__name__)

BOM = "\ufeff"
RE_LINE_BREAK = re.compile(r"\r?\n|\r")
RE_DIGITS = re.compile(r"\d+")

# これ未満の確信度の chardet 推定は候補にしない
CHARDET_MIN_CONFIDENCE = 0.8

# 全体が106の倍数にならないデコード結果の減点
FRAMING_PENALTY = 1_000_000


def score_decoded(text: str) -> int:
    """
    デコード結果が NACHAM ファイルらしいかを点数化する。

    - 種別が正しい106文字レコードの数が多いほど高い
    - 全体が106の倍数にならなければ大きく減点
    - 置換文字・制御文字は減点
    """
    compact = compact_text(text)
    records = frame_records(compact)
    num_valid = sum(1 for rec in records if rec.is_known_type)
    num_replacement = compact.count("\ufffd")
    num_ctrl = sum(1 for ch in compact if ord(ch) < 0x20)

    score = num_valid - (num_replacement * 10 + num_ctrl * 2)
    if len(compact) % RECORD_LENGTH != 0:
        score -= FRAMING_PENALTY
    return score


def decode_bytes(raw: bytes) -> str:
    """
    ファイルのバイト列をテキスト化する。

    - まず UTF-8（BOM 付きも含む）
    - だめなら cp1252 / latin-1 と、確信度の高い chardet の推定を候補にし、
      score_decoded() が一番高いものを採用する
    """
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    candidate_encodings = ["cp1252", "latin-1"]

    guess = chardet.detect(raw)
    encoding = guess.get("encoding")
    confidence = guess.get("confidence") or 0.0
    if encoding and confidence >= CHARDET_MIN_CONFIDENCE:
        if encoding.lower() not in candidate_encodings:
            candidate_encodings.append(encoding)
    elif encoding:
        logger.debug("chardet guess %s ignored (confidence %.2f)", encoding, confidence)

    best_text: Optional[str] = None
    best_encoding: Optional[str] = None
    best_score = float("-inf")

    for enc in candidate_encodings:
        try:
            text = raw.decode(enc)
        except (UnicodeDecodeError, LookupError):
            continue

        score = score_decoded(text)
        if score > best_score:
            best_score = score
            best_text = text
            best_encoding = enc

    if best_text is None:
        # latin-1 は失敗しないのでここには来ない
        return raw.decode("latin-1", errors="replace")

    logger.debug("decoded as %s (score %s)", best_encoding, best_score)
    return best_text


def compact_text(text: str) -> str:
    """
    先頭の BOM を取り除き、改行をすべて除去して1本の文字列にする。
    """
    if text.startswith(BOM):
        text = text[1:]
    return RE_LINE_BREAK.sub("", text)


def frame_records(text: str) -> List[NachamRecord]:
    """
    106 文字ごとに区切って NachamRecord のリストにする。
    末尾の106文字未満の端数は捨てる（プリフライトで先に弾かれる）。
    """
    count = len(text) // RECORD_LENGTH
    return [
        NachamRecord(index=i, raw=text[i * RECORD_LENGTH:(i + 1) * RECORD_LENGTH])
        for i in range(count)
    ]


def read_nacham_file(path: Union[str, Path]) -> str:
    """
    ファイルを読み込み、検証エンジンにそのまま渡せる文字列を返す。
    """
    path = Path(path)
    raw = path.read_bytes()
    text = compact_text(decode_bytes(raw))
    logger.info("read %s: %d chars, %d records", path.name, len(text), len(text) // RECORD_LENGTH)
    return text


def serial_from_filename(name: Union[str, Path]) -> str:
    """
    ファイル名（拡張子を除く）の末尾側の数字列を連番として取り出す。
    例: "PAGOS20240115_007.txt" -> "007"
    見つからなければ空文字列。
    """
    stem = Path(name).stem
    found = RE_DIGITS.findall(stem)
    if not found:
        return ""
    return found[-1]
