# src/nachamview/models/nacham_batch.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Optional

from nachamview.code_tables import DEFAULT_ADDENDA_TYPES, TransactionCodeRule

# 種別8・種別9 のコントロール合計は右端10桁で持つ
CONTROL_TOTAL_MODULUS = 10 ** 10


@dataclass
class EntryContext:
    """
    直近の種別6と、それにぶら下がる種別7の検証に使う状態。
    """
    index: int                   # 種別6のレコード番号
    counter: str                 # 連番7桁
    trace: str                   # 15桁シーケンス
    addenda_allowed: bool        # アデンダ指示子が '1' か
    next_addenda_seq: int = 1    # 次に期待するアデンダ連番
    indicator_flagged: bool = False
    # 請求書参照 → 最初に出現した種別7のレコード番号
    references: Dict[str, int] = field(default_factory=dict)


@dataclass
class BatchState:
    """
    1ロット（種別5〜次の種別8まで）の集計状態。
    """
    start_index: int             # 種別5のレコード番号
    class_code: str
    service_type: str
    description: str
    originator_code: str
    batch_number: str
    rule: Optional[TransactionCodeRule] = None
    sequence_ok: bool = True     # 種別5のロット番号が連番どおりだったか

    count6: int = 0
    count7: int = 0
    sum_debit: int = 0           # センタボ単位
    sum_credit: int = 0
    sum_control: int = 0
    has_debit: bool = False

    # 最初の種別6で確定する受取参加者コード（8桁 + チェックディジット）
    receiver_code: Optional[str] = None
    current_entry: Optional[EntryContext] = None

    @property
    def allowed_codes(self) -> Optional[frozenset]:
        if self.rule is None:
            return None
        return self.rule.allowed_codes

    @property
    def addenda_types(self) -> frozenset:
        if self.rule is None:
            return DEFAULT_ADDENDA_TYPES
        return self.rule.addenda_types

    @property
    def requires_unique_reference(self) -> bool:
        return self.rule is not None and self.rule.unique_invoice_ref

    @property
    def control_checksum(self) -> int:
        return self.sum_control % CONTROL_TOTAL_MODULUS

    def entry_addenda_count(self, include_addenda: bool = True) -> int:
        return self.count6 + (self.count7 if include_addenda else 0)


@dataclass
class FileTotals:
    """
    ファイル全体の集計。最初の種別9と突き合わせる。
    """
    batch_count: int = 0
    entry_count: int = 0
    addenda_count: int = 0
    control_total: int = 0       # 各種別8の申告値の合計
    debit_total: int = 0
    credit_total: int = 0

    @property
    def control_checksum(self) -> int:
        return self.control_total % CONTROL_TOTAL_MODULUS

    def entry_addenda_count(self, include_addenda: bool = True) -> int:
        return self.entry_count + (self.addenda_count if include_addenda else 0)
