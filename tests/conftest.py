"""
Pytest configuration and fixtures for the NACHAM validator tests.

Records are assembled column by column so that every test states the
fields it cares about and leaves the rest blank.
"""

import os
from typing import Dict, List, Optional

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from nachamview.code_tables import is_debit_code  # noqa: E402
from nachamview.constants import FILE_SIGNATURE, ORIGINATOR_CODE  # noqa: E402

RECORD_LENGTH = 106


# =============================================================================
# Record builders
# =============================================================================

def blank(record_type: str) -> List[str]:
    buf = [" "] * RECORD_LENGTH
    buf[0] = record_type
    return buf


def put(buf: List[str], start: int, value: str) -> None:
    buf[start:start + len(value)] = list(value)


def num(value: int, width: int) -> str:
    return str(value).zfill(width)


def finish(buf: List[str]) -> str:
    rec = "".join(buf)
    assert len(rec) == RECORD_LENGTH
    return rec


def file_header(
    created: str = "20240115",
    time: str = "1030",
    ident: str = "A",
    signature: str = FILE_SIGNATURE,
) -> str:
    r = blank("1")
    put(r, 1, "01")
    put(r, 3, " 000000001")
    put(r, 14, signature)
    put(r, 23, created)
    put(r, 31, time)
    put(r, 35, ident)
    put(r, 36, "106")
    put(r, 39, "10")
    put(r, 41, "1")
    put(r, 42, "BANCO DESTINO".ljust(23))
    put(r, 65, "EMPRESA ORIGEN".ljust(23))
    return finish(r)


def batch_header(
    number: int = 1,
    class_code: str = "220",
    service: str = "PPD",
    description: str = "NOMINA",
    effective: str = "20240115",
    julian: str = "015",
    originator: str = ORIGINATOR_CODE,
    number_text: Optional[str] = None,
) -> str:
    r = blank("5")
    put(r, 1, class_code)
    put(r, 4, "EMPRESA ORIGEN".ljust(16))
    put(r, 40, "9001234567")
    put(r, 50, service.ljust(3))
    put(r, 53, description.ljust(10))
    put(r, 63, effective)
    put(r, 71, effective)
    put(r, 79, julian)
    put(r, 82, "1")
    put(r, 83, originator)
    put(r, 91, number_text if number_text is not None else num(number, 7))
    return finish(r)


def entry(
    counter: int,
    amount: int = 10000,
    code: str = "22",
    receiver: str = "00000001",
    check_digit: str = "7",
    indicator: str = "0",
    trace_code: str = ORIGINATOR_CODE,
) -> str:
    r = blank("6")
    put(r, 1, code)
    put(r, 3, receiver)
    put(r, 11, check_digit)
    put(r, 12, "12345678901234567")
    put(r, 29, num(amount, 18))
    put(r, 47, "000000012345678")
    put(r, 62, "JUAN PEREZ".ljust(22))
    put(r, 86, indicator)
    put(r, 87, trace_code)
    put(r, 95, num(counter, 7))
    return finish(r)


def addenda(
    seq: int,
    entry_counter: int,
    reference: str = "",
    addenda_type: str = "05",
) -> str:
    r = blank("7")
    put(r, 1, addenda_type)
    put(r, 3, "900123456700000")
    put(r, 20, "PAGO".ljust(10))
    put(r, 31, reference.ljust(20))
    put(r, 83, num(seq, 4))
    put(r, 87, num(entry_counter, 7))
    return finish(r)


def return_addenda(addenda_trace: str, reason: str = "R01") -> str:
    r = blank("7")
    put(r, 1, "99")
    put(r, 3, reason)
    put(r, 6, addenda_trace)
    put(r, 81, addenda_trace)
    return finish(r)


def batch_control(
    count: int,
    control: int,
    debit: int,
    credit: int,
    number: int = 1,
    class_code: str = "220",
    originator: str = ORIGINATOR_CODE,
) -> str:
    r = blank("8")
    put(r, 1, class_code)
    put(r, 4, num(count, 6))
    put(r, 10, num(control % 10 ** 10, 10))
    put(r, 20, num(debit, 18))
    put(r, 38, num(credit, 18))
    put(r, 56, "9001234567")
    put(r, 91, originator)
    put(r, 99, num(number, 7))
    return finish(r)


def file_control(
    batches: int,
    blocks: int,
    count: int,
    control: int,
    debit: int,
    credit: int,
) -> str:
    r = blank("9")
    put(r, 1, num(batches, 6))
    put(r, 7, num(blocks, 6))
    put(r, 13, num(count, 8))
    put(r, 21, num(control % 10 ** 10, 10))
    put(r, 31, num(debit, 18))
    put(r, 49, num(credit, 18))
    return finish(r)


FILLER_9 = "9" * RECORD_LENGTH


class NachamFileBuilder:
    """
    Assembles a consistent NACHAM file: every batch gets a type-8 with
    correct totals and finish() appends a matching trailer.
    """

    def __init__(self, **header_kwargs) -> None:
        self.records: List[str] = [file_header(**header_kwargs)]
        self.next_batch = 1
        self.next_trace = 1
        self.batch_count = 0
        self.entry_addenda = 0
        self.control = 0
        self.debit = 0
        self.credit = 0
        # index of the type-5 / type-8 of every batch
        self.batch_ranges: List[Dict[str, int]] = []

    def add_batch(
        self,
        entries: List[Dict],
        class_code: str = "220",
        service: str = "PPD",
        description: str = "NOMINA",
        number: Optional[int] = None,
    ) -> "NachamFileBuilder":
        number = self.next_batch if number is None else number
        self.next_batch = number + 1
        start = len(self.records)
        self.records.append(batch_header(number, class_code, service, description))

        count = control = debit = credit = 0
        has_debit = False
        for item in entries:
            counter = self.next_trace
            self.next_trace += 1
            code = item.get("code", "22")
            amount = item.get("amount", 10000)
            receiver = item.get("receiver", "00000001")
            refs = item.get("addenda", [])
            self.records.append(
                entry(counter, amount, code, receiver, indicator="1" if refs else "0")
            )
            count += 1
            control += int(receiver)
            if is_debit_code(code):
                debit += amount
                has_debit = True
            else:
                credit += amount
            for seq, ref in enumerate(refs, start=1):
                self.records.append(addenda(seq, counter, ref))
                count += 1

        declared_credit = 0 if has_debit else credit
        self.records.append(
            batch_control(count, control, debit, declared_credit, number, class_code)
        )
        self.batch_ranges.append({"start": start, "end": len(self.records) - 1})

        self.batch_count += 1
        self.entry_addenda += count
        self.control += control % 10 ** 10
        self.debit += debit
        self.credit += declared_credit
        return self

    def build(self, fillers: int = 0) -> str:
        total = len(self.records) + 1 + fillers
        blocks = -(-total // 10)
        trailer = file_control(
            self.batch_count, blocks, self.entry_addenda,
            self.control, self.debit, self.credit,
        )
        return "".join(self.records + [trailer] + [FILLER_9] * fillers)


def replace_field(text: str, record_index: int, start: int, value: str) -> str:
    """Overwrite columns of one record in an already built file."""
    offset = record_index * RECORD_LENGTH + start
    return text[:offset] + value + text[offset + len(value):]


def records_of(text: str) -> List[str]:
    return [text[i:i + RECORD_LENGTH] for i in range(0, len(text), RECORD_LENGTH)]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def builder():
    return NachamFileBuilder()


@pytest.fixture
def minimal_file():
    """1 / 5 / 6 / 8 / 9 with one credit entry."""
    return NachamFileBuilder().add_batch([{"amount": 150075}]).build()


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app
