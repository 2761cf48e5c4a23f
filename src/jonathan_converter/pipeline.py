"""変換パイプラインモジュール

ゲームのルートディレクトリ配下のグラフィックとテキストを順番に変換する
パイプラインを定義する。グラフィックジョブが全ファイルを処理し終えてから
テキストジョブを開始する。
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from jonathan_converter.config import ConverterConfig, JobConfig, get_default_config
from jonathan_converter.converter.base import BaseConverter, ConversionError
from jonathan_converter.converter.encoding import TextConverter
from jonathan_converter.converter.image import PCXImageConverter
from jonathan_converter.converter.manager import (
    ConversionJob,
    ConversionManager,
    ConversionSummary,
    ProgressCallback,
)
from jonathan_converter.logger import ConversionLogger, LogConfig, VerboseLevel


class AssetCategory(Enum):
    """アセット種別

    パイプラインは以下の順序でジョブを実行する:
    1. GRAPHICS: PCX → PNG
    2. TEXT: 独自文字コード → UTF-8
    """

    GRAPHICS = "graphics"
    TEXT = "text"


CATEGORY_TITLE: dict[AssetCategory, str] = {
    AssetCategory.GRAPHICS: "グラフィックを変換しています ...",
    AssetCategory.TEXT: "テキストを変換しています ...",
}


@dataclass
class PipelineResult:
    """パイプライン実行結果

    Attributes:
        success: 全ジョブが中断されずに完了したか（個々のファイルの失敗は含まない）
        summaries: 完了したジョブのサマリーのリスト
        error: ジョブを中断させた例外（成功時はNone）
        statistics: 実行統計情報（処理時間、ファイル数など）
    """

    success: bool
    summaries: list[ConversionSummary] = field(default_factory=list)
    error: ConversionError | None = None
    statistics: dict[str, Any] = field(default_factory=dict)

    @property
    def failed_files(self) -> int:
        """変換に失敗したファイルの総数を返す"""
        return sum(summary.failed for summary in self.summaries)


class AssetPipeline:
    """変換パイプラインオーケストレーター

    使用例:
        >>> pipeline = AssetPipeline(ConverterConfig(root_dir=Path("jonathan")))
        >>> result = pipeline.run()
        >>> if not result.success:
        ...     raise SystemExit(1)
    """

    def __init__(
        self,
        config: ConverterConfig | None = None,
        logger: ConversionLogger | None = None,
    ) -> None:
        """パイプラインを初期化する

        Args:
            config: 変換設定（Noneの場合はデフォルト設定）
            logger: ログ出力先（Noneの場合は標準設定のロガー）
        """
        self._config = config or get_default_config()
        self._logger = logger or ConversionLogger(LogConfig(verbose_level=VerboseLevel.NORMAL))

    @property
    def config(self) -> ConverterConfig:
        """変換設定を取得する"""
        return self._config

    def build_jobs(self) -> list[tuple[AssetCategory, ConversionJob]]:
        """設定から実行順に変換ジョブを組み立てる

        Returns:
            (アセット種別, 変換ジョブ)のタプルのリスト
        """
        return [
            (
                AssetCategory.GRAPHICS,
                self._make_job(AssetCategory.GRAPHICS, self._config.graphics, PCXImageConverter()),
            ),
            (
                AssetCategory.TEXT,
                self._make_job(
                    AssetCategory.TEXT,
                    self._config.text,
                    TextConverter(line_ending=self._config.line_ending),
                ),
            ),
        ]

    def _make_job(
        self, category: AssetCategory, job_config: JobConfig, converter: BaseConverter
    ) -> ConversionJob:
        root = self._config.root_dir
        return ConversionJob(
            name=category.value,
            input_dir=root / job_config.input_dir,
            input_ext=job_config.input_ext,
            output_dir=root / job_config.output_dir,
            output_ext=job_config.output_ext,
            converter=converter,
        )

    def run(self, progress_callback: ProgressCallback | None = None) -> PipelineResult:
        """パイプラインを実行する

        ジョブを順番に実行する。入力ディレクトリを読み込めない等でジョブが中断した場合は
        その例外の連鎖をログに出力し、以降のジョブを実行せずに失敗を返す。個々のファイルの変換失敗はログに出力されるのみで、
        実行結果は成功となる。

        Args:
            progress_callback: ジョブごとの進捗通知用コールバック（オプション）

        Returns:
            パイプライン実行結果
        """
        start_time = time.time()
        manager = ConversionManager(
            max_workers=self._config.workers,
            logger=self._logger,
            progress_callback=progress_callback,
        )

        summaries: list[ConversionSummary] = []
        statistics: dict[str, Any] = {}

        for index, (category, job) in enumerate(self.build_jobs()):
            if index > 0:
                self._logger.info("")
            self._logger.info(CATEGORY_TITLE[category])
            self._logger.debug(
                f"{job.input_dir} (*.{job.input_ext}) -> {job.output_dir} (*.{job.output_ext})"
            )

            job_start = time.time()
            try:
                summary = manager.run_job(job)
            except ConversionError as e:
                self._logger.log_error_chain(e)
                statistics["total_time_seconds"] = round(time.time() - start_time, 2)
                return PipelineResult(
                    success=False,
                    summaries=summaries,
                    error=e,
                    statistics=statistics,
                )

            summaries.append(summary)
            self._logger.log_summary(summary)
            statistics[f"{category.value}_time_seconds"] = round(time.time() - job_start, 2)
            statistics[f"{category.value}_files"] = summary.total

        statistics["total_time_seconds"] = round(time.time() - start_time, 2)
        return PipelineResult(success=True, summaries=summaries, statistics=statistics)


def run(root_dir: str = ".", logger: ConversionLogger | None = None) -> PipelineResult:
    """ルートディレクトリを指定してデフォルト構成のパイプラインを実行する

    Args:
        root_dir: ゲームのルートディレクトリ
        logger: ログ出力先（オプション）

    Returns:
        パイプライン実行結果
    """
    config = ConverterConfig(root_dir=Path(root_dir))
    return AssetPipeline(config, logger).run()
