"""共通テストフィクスチャ"""

import struct
from collections.abc import Callable
from pathlib import Path

import pytest

PCX_HEADER_FORMAT = "<4B6H48s2B4H54s"


def grayscale_palette() -> bytes:
    """インデックスiが(i, i, i)となる256色パレットを返す"""
    return bytes(value for i in range(256) for value in (i, i, i))


def rle_encode(data: bytes) -> bytes:
    """PCX形式でRLE圧縮する（同一値の連続は最大63バイトのランにまとめる）"""
    out = bytearray()
    pos = 0
    while pos < len(data):
        value = data[pos]
        count = 1
        while pos + count < len(data) and data[pos + count] == value and count < 63:
            count += 1
        if count > 1 or value >= 0xC0:
            out.append(0xC0 | count)
            out.append(value)
        else:
            out.append(value)
        pos += count
    return bytes(out)


def create_pcx_data(
    *,
    width: int = 2,
    height: int = 2,
    pixels: bytes | None = None,
    palette: bytes | None = None,
    planes: int = 1,
    bytes_per_line: int | None = None,
    magic: bytes = b"\x0a\x05\x01\x08",
    body: bytes | None = None,
    palette_marker: int | None = 0x0C,
) -> bytes:
    """テスト用のPCXデータを生成する

    Args:
        width: 画像の幅
        height: 画像の高さ
        pixels: 行優先のパレットインデックス（Noneの場合は0, 1, 2, ...）
        palette: 768バイトのパレット（Noneの場合はグレースケール）
        planes: カラープレーン数
        bytes_per_line: スキャンライン長（Noneの場合は幅と同じ）
        magic: 先頭4バイト
        body: RLE圧縮済みデータ（Noneの場合はpixelsから生成）
        palette_marker: パレット直前のマーカー（Noneの場合はパレットを付けない）

    Returns:
        PCX形式のバイト列
    """
    if pixels is None:
        pixels = bytes(i % 256 for i in range(width * height))
    if palette is None:
        palette = grayscale_palette()
    if bytes_per_line is None:
        bytes_per_line = width

    header = magic + struct.pack(
        PCX_HEADER_FORMAT,
        0,
        0,
        0,
        0,
        0,
        0,
        width - 1,
        height - 1,
        72,
        72,
        b"\x00" * 48,
        0,
        planes,
        bytes_per_line,
        1,
        0,
        0,
        b"\x00" * 54,
    )[4:]

    if body is None:
        rows = bytearray()
        for y in range(height):
            row = pixels[y * width : (y + 1) * width]
            rows.extend(row + b"\x00" * (bytes_per_line - width))
        body = rle_encode(bytes(rows) * planes)

    data = header + body
    if palette_marker is not None:
        data += bytes([palette_marker]) + palette
    return data


@pytest.fixture
def pcx_factory() -> Callable[..., bytes]:
    """PCXデータ生成関数を返すフィクスチャ"""
    return create_pcx_data


@pytest.fixture
def game_dir(tmp_path: Path) -> Path:
    """GRAFIKとTEXTディレクトリを持つゲームディレクトリを作成する"""
    root = tmp_path / "jonathan"
    (root / "GRAFIK").mkdir(parents=True)
    (root / "TEXT").mkdir()
    return root
