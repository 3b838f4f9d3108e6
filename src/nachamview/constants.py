# src/nachamview/constants.py
"""
この機関の NACHAM ファイル固有の定数。
"""

# 種別1 の [14:23] に入る機関シグネチャ
FILE_SIGNATURE = "000016832"

# 種別1 の [13:23] にこの文字列があれば返却（デボルシオン）ファイル
RETURN_FILE_MARKER = "DEVOLUCION"

# ロット番号・シーケンス番号の先頭8桁（発信参加者コード）
ORIGINATOR_CODE = "00016832"

# ロットの取引クラスコード（種別5・種別8 の [1:4]）
BATCH_CLASS_CODES = {
    "200": "入出金混在",
    "220": "入金のみ",
    "225": "出金のみ",
}

BLOCKING_FACTOR = 10
RECORD_SIZE_LITERAL = "106"
BLOCKING_FACTOR_LITERAL = "10"
FORMAT_CODE_LITERAL = "1"

# 種別1 [35:36] の識別子に使う巡回アルファベット
IDENTIFIER_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
