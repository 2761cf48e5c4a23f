"""ConversionManager モジュール

変換ジョブ単位でのファイル列挙、出力パス決定、並列変換、進捗管理を行う
ConversionManagerを提供する。
"""

from __future__ import annotations

import os
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock
from typing import TYPE_CHECKING

from jonathan_converter.converter.base import (
    BaseConverter,
    ConversionError,
    ConversionResult,
    ConversionStatus,
    FileConversionError,
    format_error_chain,
)
from jonathan_converter.converter.scanner import FilePair, resolve_file_pair, scan_directory

if TYPE_CHECKING:
    from jonathan_converter.logger import ConversionLogger


class OutputDirectoryError(ConversionError):
    """出力ディレクトリを作成できない場合の例外"""

    pass


@dataclass(frozen=True)
class ConversionJob:
    """変換ジョブ

    アセット種別ごとの入出力ディレクトリ、拡張子、使用するConverterをまとめる。

    Attributes:
        name: ジョブ名（ログ表示用）
        input_dir: 入力ディレクトリ
        input_ext: 入力拡張子（ドットなし、大文字小文字を区別しない）
        output_dir: 出力ディレクトリ
        output_ext: 出力拡張子（ドットなし）
        converter: 1ファイルの変換に使用するConverter
    """

    name: str
    input_dir: Path
    input_ext: str
    output_dir: Path
    output_ext: str
    converter: BaseConverter


@dataclass
class ConversionSummary:
    """変換サマリー

    1ジョブ分の変換結果を保持するデータクラス。
    mutableとして定義し、結果を蓄積できるようにする。

    Attributes:
        job_name: ジョブ名
        total: 変換対象の総ファイル数
        success: 変換成功数
        failed: 変換失敗数
        results: 個々の変換結果のリスト
    """

    job_name: str = ""
    total: int = 0
    success: int = 0
    failed: int = 0
    results: list[ConversionResult] = field(default_factory=list)

    @property
    def failures(self) -> list[ConversionResult]:
        """失敗した変換結果のリストを返す"""
        return [result for result in self.results if not result.is_success]


# 進捗コールバックの型エイリアス
ProgressCallback = Callable[[int, int], None]


class ConversionManager:
    """変換マネージャー

    ConversionJobを受け取り、対象ファイルを並列で変換するクラス。
    1ファイルの失敗は他のファイルの変換を妨げず、結果として記録・ログ出力される。

    Attributes:
        max_workers: 最大ワーカー数
        logger: ログ出力先（Noneの場合はログを出力しない）
        progress_callback: 進捗報告用コールバック
    """

    def __init__(
        self,
        max_workers: int | None = None,
        logger: ConversionLogger | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        """ConversionManagerを初期化する

        Args:
            max_workers: 最大ワーカー数（Noneの場合はCPUコア数）
            logger: ログ出力先
            progress_callback: 進捗報告用コールバック関数
        """
        self.max_workers = max_workers or self.calculate_workers()
        self.logger = logger
        self.progress_callback = progress_callback

    def run_job(self, job: ConversionJob) -> ConversionSummary:
        """変換ジョブを実行する

        入力ディレクトリの走査、出力ディレクトリの作成、出力パスの決定までは
        失敗するとジョブ全体を中断する。その後の個々のファイル変換の失敗は
        サマリーに記録されるだけで、例外は送出しない。

        Args:
            job: 実行する変換ジョブ

        Returns:
            変換結果のサマリー

        Raises:
            ScanError: 入力ディレクトリを読み込めない場合
            OutputDirectoryError: 出力ディレクトリを作成できない場合
            NoStemError: 出力パスを決定できない入力ファイルがある場合
        """
        input_paths = scan_directory(job.input_dir, job.input_ext)
        self.prepare_output_directory(job.output_dir)

        pairs = [
            resolve_file_pair(input_path, job.output_dir, job.output_ext)
            for input_path in input_paths
        ]

        summary = self.convert_files(pairs, job.converter)
        summary.job_name = job.name
        return summary

    def prepare_output_directory(self, output_dir: Path) -> None:
        """出力ディレクトリを作成する

        既に存在する場合は何もしない。

        Args:
            output_dir: 出力ディレクトリ

        Raises:
            OutputDirectoryError: 作成に失敗した場合
        """
        try:
            output_dir.mkdir(exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(
                f"出力ディレクトリ '{output_dir}' を作成できません。書き込み可能なパスか確認してください"
            ) from e

    def convert_files(self, pairs: list[FilePair], converter: BaseConverter) -> ConversionSummary:
        """複数ファイルを並列で変換する

        Args:
            pairs: 変換元と変換先のFilePairのリスト
            converter: 使用するConverter

        Returns:
            変換結果のサマリー
        """
        summary = ConversionSummary(total=len(pairs))
        completed_count = 0
        lock = Lock()

        def process_file(pair: FilePair) -> ConversionResult:
            """ファイルを処理し、進捗を報告する"""
            nonlocal completed_count
            result = self._convert_one(pair, converter)

            with lock:
                completed_count += 1
                if self.progress_callback:
                    self.progress_callback(completed_count, summary.total)

            return result

        # 並列実行
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(process_file, pair) for pair in pairs]

            for future in as_completed(futures):
                result = future.result()
                summary.results.append(result)

                if result.status == ConversionStatus.SUCCESS:
                    summary.success += 1
                    if self.logger is not None and result.dest_path is not None:
                        self.logger.log_conversion(
                            result.source_path, result.dest_path, result.status.value
                        )
                else:
                    summary.failed += 1
                    self._report_failure(result)

        return summary

    def _convert_one(self, pair: FilePair, converter: BaseConverter) -> ConversionResult:
        """単一ファイルを変換し、例外を変換結果に畳み込む

        変換中の通知も含め、1ファイルの処理で発生した例外はすべてFAILEDの結果になる。
        """
        try:
            if self.logger is not None:
                self.logger.info(f"変換中: '{pair.input_path}' -> '{pair.output_path}' ...")
            return converter.convert(pair.input_path, pair.output_path)
        except Exception as e:
            error = FileConversionError(pair.input_path, pair.output_path)
            error.__cause__ = e
            return ConversionResult(
                source_path=pair.input_path,
                dest_path=None,
                status=ConversionStatus.FAILED,
                message=format_error_chain(error),
                error=error,
            )

    def _report_failure(self, result: ConversionResult) -> None:
        if self.logger is not None and result.error is not None:
            self.logger.log_error_chain(result.error)

    @staticmethod
    def calculate_workers() -> int:
        """ワーカー数を計算する

        Returns:
            CPUコア数（最小1）
        """
        return max(1, os.cpu_count() or 1)
