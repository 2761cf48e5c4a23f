"""文字コード変換モジュール

ゲーム独自の1バイト文字コードで書かれたテキストをUTF-8に変換する機能を提供する。
"""

import os
from pathlib import Path

from .base import BaseConverter, ConversionError, ConversionResult, ConversionStatus

BOM = "\ufeff"

LINE_FEED = 10
"""改行を表すバイト値"""

SHIFTED_RANGE = range(11, 137)
"""値から10を引いたコードポイントに対応するバイト範囲（11〜136）"""

SHIFT_OFFSET = 10

# ウムラウト等の個別割り当て
SPECIAL_CHARACTERS: dict[int, str] = {
    139: "ü",
    142: "ä",
    152: "Ä",
    158: "ö",
    163: "Ö",
    164: "Ü",
    183: "ô",
    235: "ß",
}


class IllegalCharacterError(ConversionError):
    """文字コード表に存在しないバイト値が含まれる場合の例外

    Attributes:
        value: 不正なバイト値
        offset: バイト列内の位置
    """

    def __init__(self, value: int, offset: int | None = None) -> None:
        """不正なバイト値を指定して初期化する

        Args:
            value: 不正なバイト値
            offset: バイト列内の位置（不明な場合はNone）
        """
        self.value = value
        self.offset = offset
        position = f" (位置 {offset})" if offset is not None else ""
        super().__init__(f"不正な文字 {value} が含まれています{position}")


class WriteError(ConversionError):
    """テキストの書き出しに失敗した場合の例外"""

    pass


def decode_byte(value: int, line_ending: str = os.linesep) -> str:
    """1バイトを文字に変換する

    Args:
        value: バイト値
        line_ending: 改行バイトに対応する改行文字列

    Returns:
        対応する文字列

    Raises:
        IllegalCharacterError: 対応する文字がない場合
    """
    if value == LINE_FEED:
        return line_ending
    if value in SHIFTED_RANGE:
        return chr(value - SHIFT_OFFSET)
    if value in SPECIAL_CHARACTERS:
        return SPECIAL_CHARACTERS[value]
    raise IllegalCharacterError(value)


def decode_codepage(data: bytes, line_ending: str = os.linesep) -> str:
    """独自文字コードのバイト列をBOM付き文字列に変換する

    1バイトでも変換できない場合は全体を失敗とし、部分的な結果は返さない。

    Args:
        data: 変換対象のバイト列
        line_ending: 改行バイトに対応する改行文字列

    Returns:
        先頭にBOMを付けた変換後の文字列

    Raises:
        IllegalCharacterError: 対応する文字がないバイトが含まれる場合
    """
    chars = [BOM]
    for offset, value in enumerate(data):
        try:
            chars.append(decode_byte(value, line_ending))
        except IllegalCharacterError:
            raise IllegalCharacterError(value, offset) from None
    return "".join(chars)


class TextConverter(BaseConverter):
    """テキスト変換Converter

    独自文字コードのテキストファイルをBOM付きUTF-8に変換する。

    Attributes:
        line_ending: 出力に使用する改行文字列
    """

    def __init__(self, line_ending: str = os.linesep) -> None:
        """TextConverterを初期化する

        Args:
            line_ending: 出力に使用する改行文字列（デフォルト: プラットフォームの改行）
        """
        self._line_ending = line_ending

    @property
    def line_ending(self) -> str:
        """出力に使用する改行文字列を返す"""
        return self._line_ending

    def convert(self, source: Path, dest: Path) -> ConversionResult:
        """テキストファイルをUTF-8に変換する

        全体の変換が成功してから出力ファイルを作成する。

        Args:
            source: 変換元ファイルのパス
            dest: 変換先ファイルのパス

        Returns:
            変換結果

        Raises:
            ConversionError: 読み込みに失敗した場合
            IllegalCharacterError: 変換できないバイトが含まれる場合
            WriteError: 書き込みに失敗した場合
        """
        data = self._read_source(source)
        text = decode_codepage(data, self._line_ending)
        result_bytes = text.encode("utf-8")

        try:
            dest.write_bytes(result_bytes)
        except OSError as e:
            raise WriteError(f"'{dest}' に書き込めません") from e

        return ConversionResult(
            source_path=source,
            dest_path=dest,
            status=ConversionStatus.SUCCESS,
            bytes_before=len(data),
            bytes_after=len(result_bytes),
        )
