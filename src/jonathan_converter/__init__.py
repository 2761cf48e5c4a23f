"""jonathan_converter - ゲーム『Jonathan』のアセット変換CLIツール"""

from jonathan_converter.config import ConverterConfig, JobConfig
from jonathan_converter.logger import ConversionLogger, LogConfig, VerboseLevel
from jonathan_converter.pipeline import (
    AssetCategory,
    AssetPipeline,
    PipelineResult,
    run,
)

__version__ = "0.1.0"

__all__ = [
    "AssetCategory",
    "AssetPipeline",
    "ConversionLogger",
    "ConverterConfig",
    "JobConfig",
    "LogConfig",
    "PipelineResult",
    "VerboseLevel",
    "run",
]
