"""encode_pngおよびPCXImageConverterのテスト"""

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

from jonathan_converter.converter.base import ConversionError, ConversionStatus
from jonathan_converter.converter.image import EncodeError, PCXImageConverter, encode_png
from jonathan_converter.converter.pcx import (
    PALETTE_SIZE,
    DecodeError,
    NotPalettedError,
    PaletteImage,
    TooSmallError,
)


def create_palette_image() -> PaletteImage:
    """テスト用の2x2パレット画像を生成する"""
    palette = bytearray(PALETTE_SIZE)
    palette[3:6] = b"\xff\x00\x00"
    palette[6:9] = b"\x00\xff\x00"
    palette[9:12] = b"\x00\x00\xff"
    return PaletteImage(width=2, height=2, pixels=bytes([0, 1, 2, 3]), palette=bytes(palette))


class TestEncodePng:
    """encode_png関数のテスト"""

    def test_writes_indexed_png(self, tmp_path: Path) -> None:
        """正常系: インデックスカラーPNGとして書き出す"""
        dest = tmp_path / "out.png"

        encode_png(create_palette_image(), dest)

        with Image.open(dest) as img:
            assert img.format == "PNG"
            assert img.mode == "P"
            assert img.size == (2, 2)
            assert list(img.getdata()) == [0, 1, 2, 3]
            palette = img.getpalette()
            assert palette is not None
            assert palette[:12] == [0, 0, 0, 255, 0, 0, 0, 255, 0, 0, 0, 255]

    def test_bit_depth_and_color_type(self, tmp_path: Path) -> None:
        """正常系: IHDRのビット深度が8、カラータイプがインデックス(3)"""
        dest = tmp_path / "out.png"

        encode_png(create_palette_image(), dest)

        data = dest.read_bytes()
        assert data[12:16] == b"IHDR"
        assert data[24] == 8
        assert data[25] == 3

    def test_full_palette_is_embedded(self, tmp_path: Path) -> None:
        """正常系: 256色すべてのパレットがPLTEチャンクに格納される"""
        dest = tmp_path / "out.png"

        encode_png(create_palette_image(), dest)

        data = dest.read_bytes()
        index = data.index(b"PLTE")
        length = int.from_bytes(data[index - 4 : index], "big")
        assert length == PALETTE_SIZE

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        """正常系: 既存ファイルを上書きする"""
        dest = tmp_path / "out.png"
        dest.write_bytes(b"old content" * 1000)

        encode_png(create_palette_image(), dest)

        with Image.open(dest) as img:
            assert img.size == (2, 2)

    def test_unwritable_destination(self, tmp_path: Path) -> None:
        """異常系: 出力先ディレクトリが存在しない場合はEncodeError"""
        dest = tmp_path / "missing" / "out.png"

        with pytest.raises(EncodeError) as exc_info:
            encode_png(create_palette_image(), dest)

        assert isinstance(exc_info.value.__cause__, OSError)


class TestPCXImageConverter:
    """PCXImageConverterクラスのテスト"""

    def test_convert_success(self, tmp_path: Path, pcx_factory: Callable[..., bytes]) -> None:
        """正常系: PCXをPNGに変換する"""
        source = tmp_path / "BILD.PCX"
        source.write_bytes(pcx_factory(width=2, height=2, pixels=bytes([0, 1, 2, 3])))
        dest = tmp_path / "BILD.PNG"

        result = PCXImageConverter().convert(source, dest)

        assert result.status == ConversionStatus.SUCCESS
        assert result.source_path == source
        assert result.dest_path == dest
        assert result.bytes_before == source.stat().st_size
        assert result.bytes_after == dest.stat().st_size
        with Image.open(dest) as img:
            assert list(img.getdata()) == [0, 1, 2, 3]
            palette = img.getpalette()
            assert palette is not None
            assert palette[:3] == [0, 0, 0]

    @pytest.mark.parametrize(
        "kwargs,expected_error",
        [
            pytest.param({"planes": 3}, NotPalettedError, id="異常系: 3プレーン"),
            pytest.param({"palette_marker": None}, DecodeError, id="異常系: パレットなし"),
        ],
    )
    def test_convert_invalid_pcx_creates_no_output(
        self,
        tmp_path: Path,
        pcx_factory: Callable[..., bytes],
        kwargs: dict[str, object],
        expected_error: type[Exception],
    ) -> None:
        """異常系: デコード失敗時は出力ファイルを作成しない"""
        source = tmp_path / "BAD.PCX"
        source.write_bytes(pcx_factory(**kwargs))
        dest = tmp_path / "BAD.PNG"

        with pytest.raises(expected_error):
            PCXImageConverter().convert(source, dest)

        assert not dest.exists()

    def test_convert_too_small(self, tmp_path: Path) -> None:
        """異常系: 4バイト未満のファイルはTooSmallError"""
        source = tmp_path / "TINY.PCX"
        source.write_bytes(b"\x0a\x05")

        with pytest.raises(TooSmallError):
            PCXImageConverter().convert(source, tmp_path / "TINY.PNG")

    def test_convert_missing_source(self, tmp_path: Path) -> None:
        """異常系: 変換元ファイルが存在しない場合はConversionError"""
        with pytest.raises(ConversionError) as exc_info:
            PCXImageConverter().convert(tmp_path / "NONE.PCX", tmp_path / "NONE.PNG")

        assert isinstance(exc_info.value.__cause__, FileNotFoundError)
