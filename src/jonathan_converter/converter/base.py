"""Converter基底クラスモジュール

アセット変換を行うすべてのConverterの基底クラスと共通データ型を定義する。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ConversionError(Exception):
    """変換処理に関する基本例外クラス"""

    pass


class FileConversionError(ConversionError):
    """単一ファイルの変換に失敗した場合の例外

    バッチ境界で元の例外をラップし、入力・出力パスを付与する。
    元の例外は ``__cause__`` から参照できる。

    Attributes:
        source: 変換元ファイルのパス
        dest: 変換先ファイルのパス
    """

    def __init__(self, source: Path, dest: Path) -> None:
        """変換元・変換先パスを指定して初期化する

        Args:
            source: 変換元ファイルのパス
            dest: 変換先ファイルのパス
        """
        self.source = source
        self.dest = dest
        super().__init__(f"'{source}' を '{dest}' に変換できません")


class ConversionStatus(Enum):
    """変換ステータス

    ファイル変換処理の結果ステータスを表す列挙型。
    """

    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class ConversionResult:
    """変換結果を表すデータクラス

    単一ファイルの変換処理結果を保持する不変データクラス。

    Attributes:
        source_path: 変換元ファイルのパス
        dest_path: 変換先ファイルのパス（変換失敗時はNone）
        status: 変換ステータス
        message: 追加メッセージ（エラー詳細等）
        error: 変換失敗時の例外（成功時はNone）
        bytes_before: 変換前のファイルサイズ（バイト）
        bytes_after: 変換後のファイルサイズ（バイト）
    """

    source_path: Path
    dest_path: Path | None
    status: ConversionStatus
    message: str = ""
    error: Exception | None = None
    bytes_before: int = 0
    bytes_after: int = 0

    @property
    def is_success(self) -> bool:
        """変換が成功したかどうかを返す"""
        return self.status == ConversionStatus.SUCCESS


def format_error_chain(error: BaseException) -> str:
    """例外とその原因の連鎖を表示用文字列に整形する

    先頭行は ``error: <メッセージ>``、以降は ``__cause__`` を辿って
    ``caused by: <メッセージ>`` を1行ずつ出力する。

    Args:
        error: 整形対象の例外

    Returns:
        改行区切りの整形済み文字列
    """
    lines = [f"error: {error}"]
    cause = error.__cause__
    while cause is not None:
        lines.append(f"caused by: {cause}")
        cause = cause.__cause__
    return "\n".join(lines)


class BaseConverter(ABC):
    """Converterの基底クラス

    すべてのアセット変換クラスが継承する抽象基底クラス。
    画像変換、テキスト変換の具象クラスはこのクラスを継承して実装する。
    変換に失敗した場合は例外を送出し、結果の集約は呼び出し側が行う。
    """

    @abstractmethod
    def convert(self, source: Path, dest: Path) -> ConversionResult:
        """ファイルを変換する

        指定された変換元ファイルを変換し、変換先パスに出力する。

        Args:
            source: 変換元ファイルのパス
            dest: 変換先ファイルのパス

        Returns:
            変換結果を表すConversionResultオブジェクト

        Raises:
            ConversionError: 変換に失敗した場合
        """
        ...

    def _read_source(self, source: Path) -> bytes:
        """変換元ファイルを読み込む

        Args:
            source: 変換元ファイルのパス

        Returns:
            ファイルの内容

        Raises:
            ConversionError: ファイルを開けない、または読み込めない場合
        """
        try:
            return source.read_bytes()
        except OSError as e:
            raise ConversionError(f"入力ファイル '{source}' を読み込めません") from e

    def _get_file_size(self, path: Path) -> int:
        """ファイルサイズを取得する

        Args:
            path: ファイルパス

        Returns:
            ファイルサイズ（バイト）。ファイルが存在しない場合は0
        """
        if path.exists():
            return path.stat().st_size
        return 0
