"""PCXデコーダーモジュール

ゲーム内で使用される256色パレットPCX画像をデコードする機能を提供する。
対応するのは8bit・単一プレーン・256色パレットの形式のみで、
ヘッダー先頭4バイトは常に固定値で上書きしてから解析する。
"""

import struct
from dataclasses import dataclass

from jonathan_converter.converter.base import ConversionError

PALETTE_SIZE = 256 * 3
"""256色×RGBのパレットサイズ（バイト）"""


class PCXError(ConversionError):
    """PCXデコードに関する基本例外クラス"""

    pass


class TooSmallError(PCXError):
    """データが短すぎてPCXとして扱えない場合の例外"""

    pass


class DecodeError(PCXError):
    """PCXストリームを解析できない場合の例外"""

    pass


class NotPalettedError(PCXError):
    """256色パレット形式でない場合の例外"""

    pass


@dataclass(frozen=True)
class PaletteImage:
    """パレット画像

    デコード済みのパレットインデックス画像を保持する不変データクラス。

    Attributes:
        width: 画像の幅（ピクセル）
        height: 画像の高さ（ピクセル）
        pixels: 行優先のパレットインデックス（1ピクセル1バイト）
        palette: 256色分のRGB値（768バイト）
    """

    width: int
    height: int
    pixels: bytes
    palette: bytes

    def __post_init__(self) -> None:
        if len(self.pixels) != self.width * self.height:
            raise ValueError(
                f"ピクセル数が一致しません: {len(self.pixels)} != {self.width}x{self.height}"
            )
        if len(self.palette) != PALETTE_SIZE:
            raise ValueError(f"パレットサイズが不正です: {len(self.palette)}")


@dataclass(frozen=True)
class PCXHeader:
    """PCXヘッダー情報

    Attributes:
        version: バージョン番号
        bits_per_pixel: 1プレーンあたりのビット数
        xmin: 画像ウィンドウの左端
        ymin: 画像ウィンドウの上端
        xmax: 画像ウィンドウの右端
        ymax: 画像ウィンドウの下端
        planes: カラープレーン数
        bytes_per_line: 1プレーンあたりのスキャンラインのバイト数
    """

    version: int
    bits_per_pixel: int
    xmin: int
    ymin: int
    xmax: int
    ymax: int
    planes: int
    bytes_per_line: int

    @property
    def width(self) -> int:
        """画像の幅を返す"""
        return self.xmax - self.xmin + 1

    @property
    def height(self) -> int:
        """画像の高さを返す"""
        return self.ymax - self.ymin + 1

    @property
    def is_paletted(self) -> bool:
        """パレット形式かどうかを返す"""
        return self.planes == 1

    @property
    def palette_length(self) -> int:
        """パレットのエントリ数を返す（パレット形式でない場合は0）"""
        if not self.is_paletted:
            return 0
        return 1 << self.bits_per_pixel


class _RLEReader:
    """PCX RLEストリームの逐次読み出し

    ランはスキャンライン境界をまたいで継続しうるため、未消費のランを保持する。
    """

    def __init__(self, data: bytes, offset: int) -> None:
        self._data = data
        self._offset = offset
        self._run_value = 0
        self._run_remaining = 0

    @property
    def offset(self) -> int:
        """次に読み出すバイトの位置"""
        return self._offset

    def read(self, count: int) -> bytes:
        out = bytearray()
        while len(out) < count:
            if self._run_remaining > 0:
                take = min(self._run_remaining, count - len(out))
                out.extend(bytes([self._run_value]) * take)
                self._run_remaining -= take
                continue

            if self._offset >= len(self._data):
                raise DecodeError("RLEストリームが途中で終了しています")
            value = self._data[self._offset]
            self._offset += 1

            if value >= 0xC0:
                if self._offset >= len(self._data):
                    raise DecodeError("RLEストリームが途中で終了しています")
                self._run_value = self._data[self._offset]
                self._run_remaining = value & 0x3F
                self._offset += 1
            else:
                out.append(value)
        return bytes(out)


class PCXDecoder:
    """PCX画像デコーダー

    PCX形式のバイト列をPaletteImageに変換する。

    PCX形式の構造:
    - ヘッダー: 128バイト（リトルエンディアン）
    - データ: RLE圧縮されたスキャンライン
    - パレット: 最終スキャンラインの直後に続く 0x0C + 768バイト
    """

    HEADER_SIZE: int = 128
    """PCXヘッダーサイズ"""

    HEADER_FORMAT: str = "<4B6H48s2B4H54s"
    """manufacturer, version, encoding, bpp, xmin..vdpi, colormap, reserved, planes, ..."""

    HEADER_PATCH: bytes = bytes([0x0A, 0x05, 0x01, 0x08])
    """先頭4バイトの上書き値（ZSoft, バージョン5, RLE, 8bit）"""

    PALETTE_MARKER: int = 0x0C
    """256色パレットの直前に置かれるマーカー"""

    def parse_header(self, data: bytes) -> PCXHeader:
        """PCXヘッダーを解析する

        Args:
            data: ヘッダー上書き済みのPCXバイト列

        Returns:
            解析されたヘッダー情報

        Raises:
            DecodeError: データが短い、または画像ウィンドウが不正な場合
        """
        if len(data) < self.HEADER_SIZE:
            raise DecodeError("PCXヘッダーが不完全です")

        fields = struct.unpack(self.HEADER_FORMAT, data[: self.HEADER_SIZE])
        _, version, _, bits_per_pixel, xmin, ymin, xmax, ymax = fields[:8]
        planes, bytes_per_line = fields[12], fields[13]

        if xmax < xmin or ymax < ymin:
            raise DecodeError(f"画像ウィンドウが不正です: ({xmin}, {ymin})-({xmax}, {ymax})")

        return PCXHeader(
            version=version,
            bits_per_pixel=bits_per_pixel,
            xmin=xmin,
            ymin=ymin,
            xmax=xmax,
            ymax=ymax,
            planes=planes,
            bytes_per_line=bytes_per_line,
        )

    def patch_header(self, data: bytes) -> bytes:
        """先頭4バイトを固定値で上書きする

        Args:
            data: 元のファイル内容

        Returns:
            上書き済みのバイト列

        Raises:
            TooSmallError: 4バイト未満の場合
        """
        if len(data) < len(self.HEADER_PATCH):
            raise TooSmallError("PCXファイルとしては小さすぎます")
        return self.HEADER_PATCH + data[len(self.HEADER_PATCH) :]

    def decode(self, data: bytes) -> PaletteImage:
        """PCXバイト列をデコードする

        途中で失敗した場合は部分的な画像を返さず、例外を送出する。

        Args:
            data: PCXファイルの内容

        Returns:
            デコードされたPaletteImage

        Raises:
            TooSmallError: 4バイト未満の場合
            DecodeError: ストリームを解析できない場合
            NotPalettedError: 256色パレット形式でない場合
        """
        data = self.patch_header(data)
        header = self.parse_header(data)

        if not header.is_paletted or header.palette_length != 256:
            raise NotPalettedError("256色パレットのPCXではありません")

        width = header.width
        height = header.height
        if header.bytes_per_line < width:
            raise DecodeError(
                f"スキャンライン長が画像幅より短いです: {header.bytes_per_line} < {width}"
            )

        reader = _RLEReader(data, self.HEADER_SIZE)
        pixels = bytearray()
        for y in range(height):
            try:
                row = reader.read(header.bytes_per_line)
            except DecodeError as e:
                raise DecodeError(f"{y}行目のデコード中にエラーが発生しました") from e
            pixels.extend(row[:width])

        palette = self.read_palette(data, reader.offset)

        return PaletteImage(width=width, height=height, pixels=bytes(pixels), palette=palette)

    def read_palette(self, data: bytes, offset: int) -> bytes:
        """スキャンラインの直後に置かれた256色パレットを読み込む

        パレットより後ろのデータ（EOFパディング等）は無視する。

        Args:
            data: PCXファイルの内容
            offset: 最終スキャンラインの直後の位置

        Returns:
            768バイトのパレット

        Raises:
            DecodeError: パレットが見つからない場合
        """
        if offset >= len(data):
            raise DecodeError("パレットのデコード中にエラーが発生しました: データが不足しています")
        if data[offset] != self.PALETTE_MARKER:
            raise DecodeError("パレットのデコード中にエラーが発生しました: マーカーがありません")
        start = offset + 1
        if len(data) - start < PALETTE_SIZE:
            raise DecodeError("パレットのデコード中にエラーが発生しました: パレットが不完全です")
        return bytes(data[start : start + PALETTE_SIZE])
