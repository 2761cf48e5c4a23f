"""ログ出力モジュール

変換処理のログ出力を行うConversionLoggerを定義する。
VerboseLevel (詳細ログレベル)に応じた出力制御を行う。
変換ワーカーは複数スレッドから同時にログを出力するため、書き込みはロックで直列化する。
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from threading import Lock
from typing import TYPE_CHECKING, TextIO

from jonathan_converter.converter.base import format_error_chain

if TYPE_CHECKING:
    from jonathan_converter.converter.manager import ConversionSummary


class VerboseLevel(IntEnum):
    """詳細ログレベル

    ログ出力の詳細度を制御するための列挙型。
    QUIET: エラーのみ出力
    NORMAL: 変換中のファイルとサマリを出力
    VERBOSE: 各ファイルの変換結果も出力（-vオプション）
    DEBUG: 内部処理のログも出力（-vvオプション）
    """

    QUIET = -1
    NORMAL = 0
    VERBOSE = 1
    DEBUG = 2


@dataclass
class LogConfig:
    """ログ設定

    Attributes:
        verbose_level: ログの詳細度レベル
        log_file: ログ出力先ファイルパス（Noneの場合はファイル出力なし）
        use_color: エラー出力にカラーを使用するか
    """

    verbose_level: VerboseLevel = VerboseLevel.NORMAL
    log_file: Path | None = None
    use_color: bool = True


class ConversionLogger:
    """変換ログ出力クラス

    VerboseLevelに応じてメッセージのフィルタリングを行い、
    標準出力・標準エラー出力とログファイルに書き出す。

    使用例:
        >>> config = LogConfig(verbose_level=VerboseLevel.VERBOSE)
        >>> with ConversionLogger(config) as logger:
        ...     logger.info("グラフィックを変換します ...")
    """

    _ANSI_ESCAPE_PATTERN = re.compile(r"\x1b\[[0-9;]*m")
    _RED = "\x1b[31m"
    _RESET = "\x1b[0m"

    def __init__(self, config: LogConfig | None = None) -> None:
        """ロガーを初期化する

        Args:
            config: ログ設定（Noneの場合はデフォルト設定）
        """
        self._config = config or LogConfig()
        self._lock = Lock()
        self._log_file: TextIO | None = None
        if self._config.log_file:
            # クラス自体がコンテキストマネージャとして動作し、__exit__でファイルを閉じる
            self._log_file = open(  # noqa: SIM115
                self._config.log_file, "w", encoding="utf-8", errors="backslashreplace"
            )

    def __enter__(self) -> ConversionLogger:
        """コンテキストマネージャのエントリポイント"""
        return self

    def __exit__(self, *args: object) -> None:
        """コンテキストマネージャの終了処理"""
        self.close()

    def close(self) -> None:
        """ログファイルを閉じる"""
        with self._lock:
            if self._log_file:
                self._log_file.close()
                self._log_file = None

    @property
    def config(self) -> LogConfig:
        """ログ設定を取得する

        Returns:
            現在のログ設定
        """
        return self._config

    def _emit(self, level: str, message: str, console: bool, file: TextIO | None = None) -> None:
        """コンソールとログファイルに1メッセージを書き出す

        Args:
            level: ログレベル文字列
            message: 出力するメッセージ
            console: コンソールに出力するか
            file: コンソール出力先（Noneの場合は標準出力）
        """
        with self._lock:
            if console:
                stream = file or sys.stdout
                print(self._printable(message, stream), file=stream)
            if self._log_file:
                timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
                clean_message = self._strip_ansi(message)
                self._log_file.write(f"[{timestamp}] {level}: {clean_message}\n")
                self._log_file.flush()

    def _printable(self, text: str, stream: TextIO) -> str:
        """出力先のエンコーディングで表現できない文字をエスケープする

        POSIXではUTF-8として不正なファイル名がサロゲート文字として渡されるため、
        そのまま書き込むとUnicodeEncodeErrorになる。
        """
        encoding = getattr(stream, "encoding", None) or "utf-8"
        return text.encode(encoding, "backslashreplace").decode(encoding)

    def _strip_ansi(self, text: str) -> str:
        """ANSIエスケープシーケンスを除去する

        Args:
            text: 処理対象のテキスト

        Returns:
            ANSIエスケープシーケンスを除去したテキスト
        """
        return self._ANSI_ESCAPE_PATTERN.sub("", text)

    def _colorize(self, text: str) -> str:
        if not self._config.use_color:
            return text
        return f"{self._RED}{text}{self._RESET}"

    def info(self, message: str) -> None:
        """情報メッセージを出力する（NORMAL以上）"""
        self._emit("INFO", message, self._config.verbose_level >= VerboseLevel.NORMAL)

    def verbose(self, message: str) -> None:
        """詳細メッセージを出力する（VERBOSE以上）"""
        self._emit("VERBOSE", message, self._config.verbose_level >= VerboseLevel.VERBOSE)

    def debug(self, message: str) -> None:
        """デバッグメッセージを出力する（DEBUG以上）"""
        self._emit("DEBUG", message, self._config.verbose_level >= VerboseLevel.DEBUG)

    def log_error_chain(self, error: BaseException) -> None:
        """例外とその原因の連鎖を出力する（常に標準エラー出力へ）

        複数スレッドから呼ばれても連鎖の各行が連続して出力されるよう、
        1メッセージとして書き出す。

        Args:
            error: 出力する例外
        """
        self._emit("ERROR", self._colorize(format_error_chain(error)), True, sys.stderr)

    def log_conversion(self, source: Path, dest: Path, status: str) -> None:
        """ファイル変換結果をログする（VERBOSE以上）

        Args:
            source: 変換元ファイルパス
            dest: 変換先ファイルパス
            status: 変換ステータス
        """
        self.verbose(f"変換: {source.name} -> {dest.name} [{status}]")

    def log_summary(self, summary: ConversionSummary) -> None:
        """ジョブのサマリを出力する（NORMAL以上）

        Args:
            summary: ジョブの変換サマリー
        """
        self.info(
            f"{summary.job_name}: {summary.total}件中 "
            f"{summary.success}件成功、{summary.failed}件失敗"
        )
