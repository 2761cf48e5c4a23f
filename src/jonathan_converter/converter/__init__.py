"""Converter module for jonathan_converter.

アセット変換機能を提供するモジュール。
PCX画像のPNG変換、独自文字コードテキストのUTF-8変換を統一されたインターフェースで扱う。
"""

from jonathan_converter.converter.base import (
    BaseConverter,
    ConversionError,
    ConversionResult,
    ConversionStatus,
    FileConversionError,
    format_error_chain,
)
from jonathan_converter.converter.encoding import (
    IllegalCharacterError,
    TextConverter,
    WriteError,
    decode_codepage,
)
from jonathan_converter.converter.image import EncodeError, PCXImageConverter, encode_png
from jonathan_converter.converter.manager import (
    ConversionJob,
    ConversionManager,
    ConversionSummary,
    OutputDirectoryError,
)
from jonathan_converter.converter.pcx import (
    DecodeError,
    NotPalettedError,
    PaletteImage,
    PCXDecoder,
    PCXError,
    TooSmallError,
)
from jonathan_converter.converter.scanner import (
    FilePair,
    NoStemError,
    ScanError,
    resolve_file_pair,
    scan_directory,
)

__all__ = [
    "BaseConverter",
    "ConversionError",
    "ConversionJob",
    "ConversionManager",
    "ConversionResult",
    "ConversionStatus",
    "ConversionSummary",
    "DecodeError",
    "EncodeError",
    "FileConversionError",
    "FilePair",
    "IllegalCharacterError",
    "NoStemError",
    "NotPalettedError",
    "OutputDirectoryError",
    "PaletteImage",
    "PCXDecoder",
    "PCXError",
    "PCXImageConverter",
    "ScanError",
    "TextConverter",
    "TooSmallError",
    "WriteError",
    "decode_codepage",
    "encode_png",
    "format_error_chain",
    "resolve_file_pair",
    "scan_directory",
]
