"""ディレクトリ走査モジュール

入力ディレクトリから変換対象ファイルを列挙し、
入力パスに対応する出力パスを決定する。
"""

from dataclasses import dataclass
from pathlib import Path

from jonathan_converter.converter.base import ConversionError


class ScanError(ConversionError):
    """入力ディレクトリを読み込めない場合の例外"""

    pass


class NoStemError(ConversionError):
    """入力パスにファイル名部分が存在しない場合の例外"""

    pass


@dataclass(frozen=True)
class FilePair:
    """変換元と変換先のパスの組

    Attributes:
        input_path: 変換元ファイルのパス
        output_path: 変換先ファイルのパス
    """

    input_path: Path
    output_path: Path


def has_extension(path: Path, extension: str) -> bool:
    """パスが指定拡張子の通常ファイルかを判定する

    拡張子の比較は大文字小文字を区別しない。
    ファイルへのシンボリックリンクは通常ファイルとして扱う。

    Args:
        path: 判定対象のパス
        extension: 拡張子（ドットなし）

    Returns:
        通常ファイルかつ拡張子が一致する場合True
    """
    if not path.is_file():
        return False
    suffix = path.suffix
    if not suffix:
        return False
    return suffix[1:].upper() == extension.upper()


def scan_directory(directory: Path, extension: str) -> list[Path]:
    """ディレクトリ直下から指定拡張子のファイルを列挙する

    サブディレクトリは走査しない。順序はディレクトリの列挙順に従う。

    Args:
        directory: 走査対象のディレクトリ
        extension: 対象拡張子（ドットなし、大文字小文字を区別しない）

    Returns:
        一致したファイルパスのリスト

    Raises:
        ScanError: ディレクトリが存在しない、ディレクトリでない、または読み込めない場合
    """
    try:
        entries = list(directory.iterdir())
    except OSError as e:
        raise ScanError(
            f"ディレクトリ '{directory}' を読み込めません。パスが正しいか確認してください"
        ) from e

    return [entry for entry in entries if has_extension(entry, extension)]


def resolve_file_pair(input_path: Path, output_dir: Path, output_extension: str) -> FilePair:
    """入力パスから出力パスを決定する

    入力ファイル名の語幹を保持し、拡張子を置き換え、親ディレクトリを出力先にする。

    Args:
        input_path: 変換元ファイルのパス
        output_dir: 出力先ディレクトリ
        output_extension: 出力拡張子（ドットなし）

    Returns:
        変換元と変換先のFilePair

    Raises:
        NoStemError: 入力パスにファイル名部分がない場合
    """
    # ".."はPath.nameに残るため明示的に除外する
    if input_path.name in ("", ".", ".."):
        raise NoStemError(f"入力パス '{input_path}' にファイル名がありません")

    output_path = output_dir / f"{input_path.stem}.{output_extension}"
    return FilePair(input_path=input_path, output_path=output_path)
