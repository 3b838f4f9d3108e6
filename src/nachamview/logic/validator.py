# src/nachamview/logic/validator.py

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Mapping, Optional, Union

from nachamview.code_tables import is_debit_code, match_transaction_rule
from nachamview.config import ValidationOptions
from nachamview.constants import (
    BATCH_CLASS_CODES,
    BLOCKING_FACTOR,
    BLOCKING_FACTOR_LITERAL,
    FORMAT_CODE_LITERAL,
    ORIGINATOR_CODE,
    RECORD_SIZE_LITERAL,
)
from nachamview.logic.marks import (
    day_of_year,
    fmt_cents,
    fmt_money,
    fmt_thousands,
    has_error,
    ident_from_serial,
    is_fixed_digits,
    is_valid_hhmm,
    parse_digits,
    parse_yyyymmdd,
    push_unique,
)
from nachamview.logic.preflight import PreflightKind, run_preflight
from nachamview.models.nacham_batch import BatchState, EntryContext, FileTotals
from nachamview.models.nacham_record import RECORD_LENGTH, NachamRecord
from nachamview.models.record_views import (
    Addenda,
    BatchControl,
    BatchHeader,
    EntryDetail,
    FileControl,
    FileHeader,
    parse_record_view,
)
from nachamview.models.validation_result import (
    LineMark,
    LineStatus,
    MarkKind,
    ValidationResult,
)
from nachamview.parser.nacham_parser import frame_records

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]
OptionsLike = Union[ValidationOptions, Mapping[str, object], None]

MSG_MISSING_TRAILER = "ファイルコントロール（最初の種別9）が見つかりません。"

PROGRESS_STEPS = 20


class NachamValidator:
    """
    NACHAM ファイルの構造・金額の検証エンジン。

    1回の validate() 呼び出しごとに状態を作り直すので、
    同じインスタンスを何度使っても結果は入力だけで決まる。
    """

    def __init__(
        self,
        options: OptionsLike = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        if options is None:
            options = ValidationOptions()
        elif not isinstance(options, ValidationOptions):
            options = ValidationOptions.from_mapping(options)
        self.options: ValidationOptions = options
        self.on_progress = on_progress

    def validate(self, text: str) -> ValidationResult:
        outcome = run_preflight(text)

        if outcome.kind == PreflightKind.BYPASS:
            self._report(100)
            return ValidationResult.return_file(outcome.record_count)

        if outcome.kind == PreflightKind.ABORT:
            self._report(100)
            return ValidationResult.aborted(outcome.record_count, outcome.global_errors)

        scan = _Scan(frame_records(text), self.options, self._report)
        return scan.run()

    def _report(self, pct: int) -> None:
        if self.on_progress is not None:
            self.on_progress(pct)


def validate_text(
    text: str,
    options: OptionsLike = None,
    on_progress: Optional[ProgressCallback] = None,
) -> ValidationResult:
    return NachamValidator(options, on_progress).validate(text)


def _step_over(last: Optional[int]) -> Optional[int]:
    """
    読めない連番を1つ分として数える。次の正しい値が連番エラーにならないように。
    """
    return None if last is None else last + 1


class _Scan:
    """
    プリフライトを通過したレコード列を先頭から1回だけ走査する。

    状態遷移: CLOSED --5--> OPEN --(6|7)*--> OPEN --8--> CLOSED
    想定外の遷移はエラーとして記録し、走査は最後まで続ける。
    """

    def __init__(
        self,
        records: List[NachamRecord],
        options: ValidationOptions,
        report: ProgressCallback,
    ) -> None:
        self.records = records
        self.options = options
        self.report = report
        self.result = ValidationResult.empty(len(records))

        self.batch: Optional[BatchState] = None
        self.totals = FileTotals()

        # ファイル全体で連番をチェックする値（直近に観測した値）
        self.last_header_batch_number: Optional[int] = None
        self.last_control_batch_number: Optional[int] = None
        self.last_trace_counter: Optional[int] = None

        # 最初の種別9（以降の種別9は埋め草）
        self.trailer: Optional[FileControl] = None

    # ─────────────────────────────
    # マーク操作
    # ─────────────────────────────
    def _mark(self, i: int, start: int, end: int, kind: MarkKind, note: Optional[str] = None) -> None:
        push_unique(self.result.line_marks[i], LineMark(start, end, kind, note))

    def _ok(self, i: int, start: int, end: int, note: Optional[str] = None) -> None:
        self._mark(i, start, end, MarkKind.OK, note)

    def _error(self, i: int, start: int, end: int, note: Optional[str] = None) -> None:
        self._mark(i, start, end, MarkKind.ERROR, note)

    def _info(self, i: int, start: int, end: int, note: Optional[str] = None) -> None:
        self._mark(i, start, end, MarkKind.INFO, note)

    def _check(self, i: int, start: int, end: int, passed: bool, ok_note: str, error_note: str) -> bool:
        if passed:
            self._ok(i, start, end, ok_note)
        else:
            self._error(i, start, end, error_note)
        return passed

    def _reconcile(
        self,
        i: int,
        start: int,
        end: int,
        label: str,
        declared: Optional[int],
        expected: int,
        fmt: Callable[[int], str] = str,
        failures: Optional[List[str]] = None,
    ) -> bool:
        """申告値と計算値を比べて ok / error マークを付ける。"""
        if declared is None:
            note = f"{label}: 数字ではありません（計算値 {fmt(expected)}）"
            self._error(i, start, end, note)
        elif declared != expected:
            note = f"{label}が一致しません。申告: {fmt(declared)}、計算: {fmt(expected)}"
            self._error(i, start, end, note)
        else:
            self._ok(i, start, end, f"{label} OK（{fmt(expected)}）")
            return True
        if failures is not None:
            failures.append(note)
        return False

    def _stray(self, i: int, note: str) -> None:
        self._error(i, 0, RECORD_LENGTH, note)
        self.result.line_status[i] = LineStatus.ERROR
        self.result.line_reason[i] = note

    # ─────────────────────────────
    # 走査
    # ─────────────────────────────
    def run(self) -> ValidationResult:
        count = len(self.records)
        step = max(1, count // PROGRESS_STEPS)

        self._check_identifier()

        handlers = {
            FileHeader: self._on_file_header,
            BatchHeader: self._on_batch_header,
            EntryDetail: self._on_entry,
            Addenda: self._on_addenda,
            BatchControl: self._on_batch_control,
            FileControl: self._on_file_control,
        }

        for rec in self.records:
            view = parse_record_view(rec)
            if view is not None:
                handlers[type(view)](view)

            if rec.index % step == 0:
                self.report(rec.index * 100 // max(1, count))

        if self.batch is not None:
            self._abandon_batch(
                count - 1,
                "ロットが種別8で閉じられないままファイルが終わっています。",
            )

        if self.trailer is None:
            self.result.global_errors.append(MSG_MISSING_TRAILER)
        else:
            self._reconcile_trailer(self.trailer)

        self.report(100)
        logger.info(
            "validated %d records: %d batches, %d error lines, %d global errors",
            count,
            self.totals.batch_count,
            self.result.error_line_count,
            len(self.result.global_errors),
        )
        return self.result

    # ─────────────────────────────
    # 種別1
    # ─────────────────────────────
    def _check_identifier(self) -> None:
        """
        ファイル名の連番から求めた識別子と、種別1の36桁目を比べる。
        連番が無い（数値にならない）場合は検証しない。
        """
        serial = self.options.serial_from_name
        expected = ident_from_serial(serial)
        if expected is None or not self.records:
            return
        actual = self.records[0].field(35, 36)
        if not self._check(
            0, 35, 36, actual == expected,
            f"識別子 OK（{expected}、連番 {serial} から算出）",
            f"識別子が不正です。期待値: {expected}、実際: {actual}（連番 {serial}）",
        ):
            self.result.line_status[0] = LineStatus.ERROR
            self.result.line_reason[0] = "識別子がファイル名の連番と一致しません。"

    def _on_file_header(self, hdr: FileHeader) -> None:
        """
        種別1の各項目はマークを付けるだけで、行ステータスは変えない。
        （行ステータスを error にするのは識別子の不一致のみ）
        """
        i = hdr.index
        if i != 0:
            self._stray(i, "ファイルヘッダ（種別1）が先頭以外にあります。")
            return

        created = parse_yyyymmdd(hdr.creation_date)
        self._check(
            i, 23, 31, created is not None,
            f"作成日 OK（{hdr.creation_date}）",
            f"作成日が不正です（AAAAMMDD={hdr.creation_date}）",
        )
        if not is_valid_hhmm(hdr.creation_time):
            self._info(i, 31, 35, f"作成時刻が HHMM 形式ではありません（{hdr.creation_time}）")
        if hdr.record_size != RECORD_SIZE_LITERAL:
            self._info(i, 36, 39, f"レコード長は {RECORD_SIZE_LITERAL} のはずです（{hdr.record_size}）")
        if hdr.blocking_factor != BLOCKING_FACTOR_LITERAL:
            self._info(i, 39, 41, f"ブロック化係数は {BLOCKING_FACTOR_LITERAL} のはずです（{hdr.blocking_factor}）")
        if hdr.format_code != FORMAT_CODE_LITERAL:
            self._info(i, 41, 42, f"フォーマットコードは {FORMAT_CODE_LITERAL} のはずです（{hdr.format_code}）")

    # ─────────────────────────────
    # 種別5
    # ─────────────────────────────
    def _on_batch_header(self, hdr: BatchHeader) -> None:
        i = hdr.index
        if self.batch is not None:
            self._abandon_batch(
                i - 1,
                f"ロットが種別8で閉じられる前に次のロットヘッダ（{i + 1}行目）が始まっています。",
            )
            self._info(i, 0, 1, "直前のロットは閉じられていません。ここから新しいロットとして検証します。")

        self.totals.batch_count += 1

        rule = match_transaction_rule(hdr.service_type, hdr.class_code, hdr.description)
        batch = BatchState(
            start_index=i,
            class_code=hdr.class_code,
            service_type=hdr.service_type,
            description=hdr.description,
            originator_code=hdr.originator_code,
            batch_number=hdr.batch_number,
            rule=rule,
        )
        self.batch = batch

        if rule is not None:
            codes = ", ".join(sorted(rule.allowed_codes))
            self._info(i, 50, 63, f"{rule.label}: 許可される取引コード {codes}")

        if hdr.class_code not in BATCH_CLASS_CODES:
            self._info(i, 1, 4, f"未知のロットクラスコードです（{hdr.class_code}）")

        self._check_effective_date(i, hdr)

        self._check(
            i, 83, 91, hdr.originator_code == ORIGINATOR_CODE,
            f"発信参加者コード OK（{ORIGINATOR_CODE}）",
            f"発信参加者コードが不正です。期待値: {ORIGINATOR_CODE}、実際: {hdr.originator_code}",
        )

        if not is_fixed_digits(hdr.batch_number, 7):
            self._error(i, 91, 98, f"ロット番号が7桁の数字ではありません（{hdr.batch_number}）")
            batch.sequence_ok = False
            self.last_header_batch_number = _step_over(self.last_header_batch_number)
            return

        n = int(hdr.batch_number)
        last = self.last_header_batch_number
        if last is not None and n != last + 1:
            self._error(i, 91, 98, f"ロット番号が連番ではありません。期待値: {last + 1:07d}、実際: {hdr.batch_number}")
            batch.sequence_ok = False
        else:
            self._ok(i, 91, 98, f"ロット番号 OK（{hdr.batch_number}）")
        self.last_header_batch_number = n

    def _check_effective_date(self, i: int, hdr: BatchHeader) -> None:
        eff = parse_yyyymmdd(hdr.effective_date)
        if eff is None:
            self._error(i, 71, 79, f"有効日が不正です（AAAAMMDD={hdr.effective_date}）")
            return
        self._ok(i, 71, 79, f"有効日 OK（{hdr.effective_date}）")

        expected = f"{day_of_year(eff.year, eff.month, eff.day):03d}"
        self._check(
            i, 79, 82, hdr.julian_day == expected,
            f"ユリウス日 OK（{hdr.julian_day}）",
            f"ユリウス日が不正です。期待値: {expected}、実際: {hdr.julian_day}",
        )

    # ─────────────────────────────
    # 種別6
    # ─────────────────────────────
    def _on_entry(self, e: EntryDetail) -> None:
        i = e.index
        b = self.batch
        if b is None:
            self._stray(i, "ロットの外に取引明細（種別6）があります。")
            return

        b.count6 += 1
        self.totals.entry_count += 1

        allowed = b.allowed_codes
        if allowed is not None:
            self._check(
                i, 1, 3, e.transaction_code in allowed,
                f"取引コード OK（{e.transaction_code}）",
                f"このロットでは取引コード {e.transaction_code} は使えません（許可: {', '.join(sorted(allowed))}）",
            )

        receiver = e.receiver_code + e.check_digit
        if b.receiver_code is None:
            b.receiver_code = receiver
            self._ok(i, 3, 12, f"受取参加者コード {receiver}（このロットの基準値）")
        else:
            self._check(
                i, 3, 12, receiver == b.receiver_code,
                f"受取参加者コード OK（{receiver}）",
                f"受取参加者コードがロット内で異なります。期待値: {b.receiver_code}、実際: {receiver}",
            )

        amount = parse_digits(e.amount)
        if amount is None:
            self._error(i, 29, 47, f"金額が数字ではありません（{e.amount}）")
            amount = 0
        if is_debit_code(e.transaction_code):
            b.sum_debit += amount
            b.has_debit = True
        else:
            b.sum_credit += amount

        receiver_num = parse_digits(e.receiver_code)
        if receiver_num is None:
            self._error(i, 3, 11, f"受取参加者コードが数字ではありません（{e.receiver_code}）")
            receiver_num = 0
        b.sum_control += receiver_num

        if e.addenda_indicator not in ("0", "1"):
            self._error(i, 86, 87, f"アデンダ指示子は 0 か 1 です（{e.addenda_indicator!r}）")

        self._check_trace(i, e)

        b.current_entry = EntryContext(
            index=i,
            counter=e.trace_counter,
            trace=e.trace,
            addenda_allowed=e.addenda_indicator == "1",
        )

    def _check_trace(self, i: int, e: EntryDetail) -> None:
        self._check(
            i, 87, 95, e.trace_code == ORIGINATOR_CODE,
            f"シーケンス番号の固定コード OK（{ORIGINATOR_CODE}）",
            f"シーケンス番号の固定コードが不正です。期待値: {ORIGINATOR_CODE}、実際: {e.trace_code}",
        )
        if not is_fixed_digits(e.trace_counter, 7):
            self._error(i, 95, 102, f"シーケンス番号の連番が7桁の数字ではありません（{e.trace_counter}）")
            self.last_trace_counter = _step_over(self.last_trace_counter)
            return

        n = int(e.trace_counter)
        last = self.last_trace_counter
        if last is not None and n != last + 1:
            self._error(i, 95, 102, f"シーケンス番号が連番ではありません。期待値: {last + 1:07d}、実際: {e.trace_counter}")
        else:
            self._ok(i, 95, 102, f"シーケンス番号 OK（{e.trace_counter}）")
        self.last_trace_counter = n

    # ─────────────────────────────
    # 種別7
    # ─────────────────────────────
    def _on_addenda(self, a: Addenda) -> None:
        i = a.index
        b = self.batch
        if b is None:
            self._stray(i, "ロットの外にアデンダ（種別7）があります。")
            return

        b.count7 += 1
        self.totals.addenda_count += 1

        entry = b.current_entry
        if entry is None:
            self._error(i, 0, RECORD_LENGTH, "このアデンダの前にロット内の取引明細（種別6）がありません。")
            return

        if not entry.addenda_allowed:
            self._error(i, 0, 1, f"取引明細（{entry.index + 1}行目）のアデンダ指示子が 1 ではありません。")
            if not entry.indicator_flagged:
                self._error(entry.index, 86, 87, "アデンダ指示子が 1 ではないのにアデンダが続いています。")
                entry.indicator_flagged = True

        types = b.addenda_types
        self._check(
            i, 1, 3, a.addenda_type in types,
            f"アデンダ種別 OK（{a.addenda_type}）",
            f"アデンダ種別が不正です（{a.addenda_type}、許可: {', '.join(sorted(types))}）",
        )

        if a.is_return_reason:
            self._check(
                i, 81, 96, a.addenda_trace == entry.trace,
                f"元取引のシーケンス番号 OK（{entry.trace}）",
                f"アデンダのシーケンス番号が取引明細と一致しません。期待値: {entry.trace}、実際: {a.addenda_trace}",
            )
            return

        self._check_addenda_sequence(i, a, entry)

        self._check(
            i, 87, 94, a.entry_counter == entry.counter,
            f"取引明細の連番 OK（{entry.counter}）",
            f"取引明細の連番と一致しません。期待値: {entry.counter}、実際: {a.entry_counter}",
        )

        if b.requires_unique_reference:
            self._check_invoice_reference(i, a, entry)

    def _check_addenda_sequence(self, i: int, a: Addenda, entry: EntryContext) -> None:
        expected = f"{entry.next_addenda_seq:04d}"
        self._check(
            i, 83, 87, a.addenda_sequence == expected,
            f"アデンダ連番 OK（{expected}）",
            f"アデンダ連番が不正です。期待値: {expected}、実際: {a.addenda_sequence}",
        )
        if is_fixed_digits(a.addenda_sequence, 4):
            entry.next_addenda_seq = int(a.addenda_sequence) + 1
        else:
            entry.next_addenda_seq += 1

    def _check_invoice_reference(self, i: int, a: Addenda, entry: EntryContext) -> None:
        ref = a.invoice_reference.strip()
        if not ref:
            self._error(i, 31, 51, "請求書参照が空です。")
            return
        first = entry.references.get(ref)
        if first is None:
            entry.references[ref] = i
            return
        self._error(i, 31, 51, f"請求書参照 {ref} が重複しています（最初は {first + 1}行目）")
        self._error(first, 31, 51, f"請求書参照 {ref} が {i + 1}行目でも使われています")

    # ─────────────────────────────
    # 種別8
    # ─────────────────────────────
    def _on_batch_control(self, c: BatchControl) -> None:
        i = c.index
        b = self.batch
        if b is None:
            self._stray(i, "対応するロットヘッダ（種別5）のないロットコントロール（種別8）です。")
            return

        opts = self.options
        failures: List[str] = []

        declared_count = parse_digits(c.entry_addenda_count)
        declared_ctrl = parse_digits(c.control_total)
        declared_deb = parse_digits(c.debit_total)
        declared_cred = parse_digits(c.credit_total)

        self.totals.control_total += declared_ctrl or 0
        self.totals.debit_total += declared_deb or 0
        self.totals.credit_total += declared_cred or 0

        if not self._check(
            i, 1, 4, c.class_code == b.class_code,
            f"ロットクラスコード OK（{c.class_code}）",
            f"ロットクラスコードが種別5と一致しません。期待値: {b.class_code}、実際: {c.class_code}",
        ):
            failures.append("クラスコード不一致")

        if opts.check_trans_count:
            self._reconcile(
                i, 4, 10, "取引/アデンダ件数",
                declared_count, b.entry_addenda_count(opts.include_addenda_in_trans),
                failures=failures,
            )

        if opts.check_control_totals:
            self._reconcile(
                i, 10, 20, "コントロール合計",
                declared_ctrl, b.control_checksum, fmt_thousands, failures,
            )

        if opts.check_debits:
            self._reconcile(
                i, 20, 38, "借方合計",
                declared_deb, b.sum_debit, fmt_money, failures,
            )

        if opts.check_credits:
            label = "貸方合計（借方ロットのため 0）" if b.has_debit else "貸方合計"
            expected_cred = 0 if b.has_debit else b.sum_credit
            self._reconcile(
                i, 38, 56, label,
                declared_cred, expected_cred, fmt_money, failures,
            )

        if not self._check(
            i, 91, 99, c.originator_code == b.originator_code,
            f"発信参加者コード OK（{c.originator_code}）",
            f"発信参加者コードが種別5と一致しません。期待値: {b.originator_code}、実際: {c.originator_code}",
        ):
            failures.append("発信参加者コード不一致")

        if not self._check_control_batch_number(i, c, b):
            failures.append("ロット番号不一致")

        self._close_batch(i, failures)

    def _check_control_batch_number(self, i: int, c: BatchControl, b: BatchState) -> bool:
        """
        種別8のロット番号は種別5と同じ値であり、かつ
        直前の種別8から +1 になっていること。
        種別5で既に連番エラーを出したロットでは、同じ段差を二重に報告しない。
        """
        digits = is_fixed_digits(c.batch_number, 7)
        n = int(c.batch_number) if digits else None
        last = self.last_control_batch_number
        if n is not None:
            self.last_control_batch_number = n
        else:
            self.last_control_batch_number = _step_over(last)

        if c.batch_number != b.batch_number:
            self._error(i, 99, 106, f"ロット番号が種別5と一致しません。期待値: {b.batch_number}、実際: {c.batch_number}")
            return False
        if n is None:
            self._error(i, 99, 106, f"ロット番号が7桁の数字ではありません（{c.batch_number}）")
            return False
        if b.sequence_ok and last is not None and n != last + 1:
            self._error(i, 99, 106, f"ロット番号が前のロットから連番ではありません。期待値: {last + 1:07d}、実際: {c.batch_number}")
            return False
        self._ok(i, 99, 106, f"ロット番号 OK（{c.batch_number}）")
        return True

    def _close_batch(self, i: int, failures: List[str]) -> None:
        """
        種別5〜この種別8までを、ロット全体の結果でまとめて塗る。
        """
        b = self.batch
        assert b is not None
        marks = self.result.line_marks
        ok = not any(has_error(marks[j]) for j in range(b.start_index, i + 1))
        status = LineStatus.OK if ok else LineStatus.ERROR
        for j in range(b.start_index, i + 1):
            self.result.line_status[j] = status
        if not ok:
            self.result.line_reason[i] = " | ".join(failures) if failures else "ロット内のレコードにエラーがあります。"

        logger.debug(
            "batch %d-%d closed: %s (6=%d, 7=%d, debit=%s, credit=%s)",
            b.start_index, i, status.value, b.count6, b.count7,
            fmt_cents(b.sum_debit), fmt_cents(b.sum_credit),
        )
        self.batch = None

    def _abandon_batch(self, last_index: int, reason: str) -> None:
        """
        種別8で閉じられなかったロットをエラーとして塗り、状態を破棄する。
        """
        b = self.batch
        assert b is not None
        self._error(b.start_index, 0, 1, reason)
        for j in range(b.start_index, last_index + 1):
            self.result.line_status[j] = LineStatus.ERROR
        self.result.line_reason[b.start_index] = reason
        logger.debug("batch starting at %d abandoned: %s", b.start_index, reason)
        self.batch = None

    # ─────────────────────────────
    # 種別9
    # ─────────────────────────────
    def _on_file_control(self, fc: FileControl) -> None:
        i = fc.index
        if self.batch is not None:
            self._abandon_batch(i - 1, "ロットが種別8で閉じられないままファイルコントロールに達しています。")

        if self.trailer is None:
            self.trailer = fc
            self.result.trailer_index = i
        else:
            self._info(i, 0, RECORD_LENGTH, "種別9の埋め草レコード（検証対象外）")

    def _reconcile_trailer(self, fc: FileControl) -> None:
        i = fc.index
        opts = self.options
        totals = self.totals
        count = len(self.records)
        failures: List[str] = []

        self._reconcile(
            i, 1, 7, "ロット数",
            parse_digits(fc.batch_count), totals.batch_count, failures=failures,
        )
        self._reconcile(
            i, 7, 13, "ブロック数",
            parse_digits(fc.block_count), -(-count // BLOCKING_FACTOR), failures=failures,
        )
        if opts.check_trans_count:
            self._reconcile(
                i, 13, 21, "取引/アデンダ件数",
                parse_digits(fc.entry_addenda_count),
                totals.entry_addenda_count(opts.include_addenda_in_trans),
                failures=failures,
            )
        if opts.check_control_totals:
            self._reconcile(
                i, 21, 31, "コントロール合計",
                parse_digits(fc.control_total), totals.control_checksum, failures=failures,
            )
        if opts.check_debits:
            self._reconcile(
                i, 31, 49, "借方合計",
                parse_digits(fc.debit_total), totals.debit_total, fmt_cents, failures,
            )
        if opts.check_credits:
            self._reconcile(
                i, 49, 67, "貸方合計",
                parse_digits(fc.credit_total), totals.credit_total, fmt_cents, failures,
            )

        self.result.line_status[i] = LineStatus.ERROR if failures else LineStatus.OK
        if failures:
            self.result.line_reason[i] = " | ".join(failures)


def summarize(result: ValidationResult) -> Dict[str, int]:
    """ステータスバー表示用の件数集計"""
    ok = sum(1 for s in result.line_status if s == LineStatus.OK)
    return {
        "records": result.record_count,
        "ok_lines": ok,
        "error_lines": result.error_line_count,
        "global_errors": len(result.global_errors),
    }
