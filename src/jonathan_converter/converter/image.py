"""画像変換モジュール

256色パレットPCX画像をインデックスカラーPNGに変換する機能を提供する。
デコードはPCXDecoder、PNGへの書き出しはPillowで行う。
"""

from pathlib import Path

from PIL import Image

from jonathan_converter.converter.base import (
    BaseConverter,
    ConversionError,
    ConversionResult,
    ConversionStatus,
)
from jonathan_converter.converter.pcx import PaletteImage, PCXDecoder


class EncodeError(ConversionError):
    """PNGの書き出しに失敗した場合の例外"""

    pass


def to_pil_image(image: PaletteImage) -> Image.Image:
    """PaletteImageをPillowのPモード画像に変換する

    Args:
        image: 変換元のパレット画像

    Returns:
        パレットを設定したPIL.Imageオブジェクト
    """
    pil_image = Image.frombytes("P", (image.width, image.height), image.pixels)
    pil_image.putpalette(image.palette, rawmode="RGB")
    return pil_image


def encode_png(image: PaletteImage, dest: Path) -> None:
    """パレット画像を8bitインデックスカラーPNGとして書き出す

    既存ファイルは上書きする。失敗時に残った出力ファイルの内容は保証しない。

    Args:
        image: 書き出すパレット画像
        dest: 出力先ファイルパス

    Raises:
        EncodeError: 出力ファイルの作成または書き込みに失敗した場合
    """
    pil_image = to_pil_image(image)
    try:
        with dest.open("wb") as f:
            pil_image.save(f, "PNG", bits=8)
    except (OSError, ValueError) as e:
        raise EncodeError(f"'{dest}' に書き込めません。書き込み可能なパスか確認してください") from e
    finally:
        pil_image.close()


class PCXImageConverter(BaseConverter):
    """PCX→PNG変換クラス

    PCXファイルを読み込んでデコードし、インデックスカラーPNGとして保存する。
    デコードが完全に成功するまで出力ファイルは作成しない。
    """

    def __init__(self, decoder: PCXDecoder | None = None) -> None:
        """PCXImageConverterを初期化する

        Args:
            decoder: 使用するPCXデコーダー（Noneの場合はデフォルト）
        """
        self._decoder = decoder or PCXDecoder()

    def convert(self, source: Path, dest: Path) -> ConversionResult:
        """PCXファイルをPNGに変換する

        Args:
            source: 変換元PCXファイルのパス
            dest: 変換先PNGファイルのパス

        Returns:
            変換結果

        Raises:
            ConversionError: 読み込みに失敗した場合
            PCXError: デコードに失敗した場合
            EncodeError: 書き出しに失敗した場合
        """
        data = self._read_source(source)
        image = self._decoder.decode(data)
        encode_png(image, dest)

        return ConversionResult(
            source_path=source,
            dest_path=dest,
            status=ConversionStatus.SUCCESS,
            bytes_before=len(data),
            bytes_after=self._get_file_size(dest),
        )
