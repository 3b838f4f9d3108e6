# src/nachamview/models/record_views.py

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union

from nachamview.models.nacham_record import NachamRecord


# ─────────────────────────────────────────────────────────
# レコード種別ごとの固定長レイアウト
# スライスはすべて 0始まり・半開区間。
# ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FileHeader:
    """種別1: ファイルヘッダ"""
    index: int
    priority_code: str
    destination: str
    origin: str
    signature: str
    creation_date: str
    creation_time: str
    file_id: str
    record_size: str
    blocking_factor: str
    format_code: str
    destination_name: str
    origin_name: str
    reference_code: str

    @classmethod
    def from_record(cls, rec: NachamRecord) -> "FileHeader":
        r = rec.raw
        return cls(
            index=rec.index,
            priority_code=r[1:3],
            destination=r[3:13],
            origin=r[13:23],
            signature=r[14:23],
            creation_date=r[23:31],
            creation_time=r[31:35],
            file_id=r[35:36],
            record_size=r[36:39],
            blocking_factor=r[39:41],
            format_code=r[41:42],
            destination_name=r[42:65],
            origin_name=r[65:88],
            reference_code=r[88:96],
        )


@dataclass(frozen=True)
class BatchHeader:
    """種別5: ロットヘッダ"""
    index: int
    class_code: str
    originator_name: str
    discretionary: str
    originator_id: str
    service_type: str
    description: str
    descriptive_date: str
    effective_date: str
    julian_day: str
    originator_status: str
    originator_code: str
    batch_number: str

    @classmethod
    def from_record(cls, rec: NachamRecord) -> "BatchHeader":
        r = rec.raw
        return cls(
            index=rec.index,
            class_code=r[1:4],
            originator_name=r[4:20],
            discretionary=r[20:40],
            originator_id=r[40:50],
            service_type=r[50:53].strip(),
            description=r[53:63].strip(),
            descriptive_date=r[63:71],
            effective_date=r[71:79],
            julian_day=r[79:82],
            originator_status=r[82:83],
            originator_code=r[83:91],
            batch_number=r[91:98],
        )


@dataclass(frozen=True)
class EntryDetail:
    """種別6: 取引明細"""
    index: int
    transaction_code: str
    receiver_code: str
    check_digit: str
    account: str
    amount: str
    receiver_id: str
    receiver_name: str
    discretionary: str
    addenda_indicator: str
    trace_code: str
    trace_counter: str

    @property
    def trace(self) -> str:
        """15桁のシーケンス番号（固定コード8桁 + 連番7桁）"""
        return self.trace_code + self.trace_counter

    @classmethod
    def from_record(cls, rec: NachamRecord) -> "EntryDetail":
        r = rec.raw
        return cls(
            index=rec.index,
            transaction_code=r[1:3],
            receiver_code=r[3:11],
            check_digit=r[11:12],
            account=r[12:29],
            amount=r[29:47],
            receiver_id=r[47:62],
            receiver_name=r[62:84],
            discretionary=r[84:86],
            addenda_indicator=r[86:87],
            trace_code=r[87:95],
            trace_counter=r[95:102],
        )


@dataclass(frozen=True)
class Addenda:
    """
    種別7: アデンダ

    addenda_type が "99" のときは返却理由レイアウト、
    それ以外は通常（"05"）レイアウトとしてフィールドを読む。
    使わない側のフィールドは空文字列。
    """
    index: int
    addenda_type: str
    # 通常レイアウト
    originator_id: str = ""
    purpose: str = ""
    invoice_reference: str = ""
    free_text: str = ""
    addenda_sequence: str = ""
    entry_counter: str = ""
    # 返却理由レイアウト
    return_reason: str = ""
    original_trace: str = ""
    death_date: str = ""
    original_receiver: str = ""
    additional_info: str = ""
    addenda_trace: str = ""

    @property
    def is_return_reason(self) -> bool:
        return self.addenda_type == RETURN_REASON_ADDENDA_TYPE

    @classmethod
    def from_record(cls, rec: NachamRecord) -> "Addenda":
        r = rec.raw
        addenda_type = r[1:3]
        if addenda_type == RETURN_REASON_ADDENDA_TYPE:
            return cls(
                index=rec.index,
                addenda_type=addenda_type,
                return_reason=r[3:6],
                original_trace=r[6:21],
                death_date=r[21:29],
                original_receiver=r[29:37],
                additional_info=r[37:81],
                addenda_trace=r[81:96],
            )
        return cls(
            index=rec.index,
            addenda_type=addenda_type,
            originator_id=r[3:18],
            purpose=r[20:30],
            invoice_reference=r[31:51],
            free_text=r[56:80],
            addenda_sequence=r[83:87],
            entry_counter=r[87:94],
        )


@dataclass(frozen=True)
class BatchControl:
    """種別8: ロットコントロール"""
    index: int
    class_code: str
    entry_addenda_count: str
    control_total: str
    debit_total: str
    credit_total: str
    originator_id: str
    auth_code: str
    originator_code: str
    batch_number: str

    @classmethod
    def from_record(cls, rec: NachamRecord) -> "BatchControl":
        r = rec.raw
        return cls(
            index=rec.index,
            class_code=r[1:4],
            entry_addenda_count=r[4:10],
            control_total=r[10:20],
            debit_total=r[20:38],
            credit_total=r[38:56],
            originator_id=r[56:66],
            auth_code=r[66:85],
            originator_code=r[91:99],
            batch_number=r[99:106],
        )


@dataclass(frozen=True)
class FileControl:
    """種別9: ファイルコントロール（トレーラ）"""
    index: int
    batch_count: str
    block_count: str
    entry_addenda_count: str
    control_total: str
    debit_total: str
    credit_total: str

    @classmethod
    def from_record(cls, rec: NachamRecord) -> "FileControl":
        r = rec.raw
        return cls(
            index=rec.index,
            batch_count=r[1:7],
            block_count=r[7:13],
            entry_addenda_count=r[13:21],
            control_total=r[21:31],
            debit_total=r[31:49],
            credit_total=r[49:67],
        )


RETURN_REASON_ADDENDA_TYPE = "99"

RecordView = Union[FileHeader, BatchHeader, EntryDetail, Addenda, BatchControl, FileControl]

_VIEW_BY_TYPE = {
    "1": FileHeader,
    "5": BatchHeader,
    "6": EntryDetail,
    "7": Addenda,
    "8": BatchControl,
    "9": FileControl,
}


def parse_record_view(rec: NachamRecord) -> Optional[RecordView]:
    """
    レコード種別に応じた型付きビューを返す。
    未知の種別なら None。
    """
    view_cls = _VIEW_BY_TYPE.get(rec.record_type)
    if view_cls is None:
        return None
    return view_cls.from_record(rec)
