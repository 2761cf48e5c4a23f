"""Configuration module for jonathan_converter."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


class ConfigError(Exception):
    """設定ファイル読み込みエラー"""

    pass


LINE_ENDINGS: dict[str, str] = {
    "lf": "\n",
    "crlf": "\r\n",
    "native": os.linesep,
}


@dataclass(frozen=True)
class JobConfig:
    """変換ジョブ設定（ディレクトリはルートディレクトリからの相対パス）"""

    input_dir: str
    input_ext: str
    output_dir: str
    output_ext: str


@dataclass(frozen=True)
class ConverterConfig:
    """ルート設定"""

    root_dir: Path = Path(".")
    graphics: JobConfig = field(
        default_factory=lambda: JobConfig(
            input_dir="GRAFIK", input_ext="PCX", output_dir="GRAFIK_PNG", output_ext="PNG"
        )
    )
    text: JobConfig = field(
        default_factory=lambda: JobConfig(
            input_dir="TEXT", input_ext="TCT", output_dir="TEXT_TXT", output_ext="TXT"
        )
    )
    workers: int | None = None
    line_ending: str = os.linesep


def get_default_config() -> ConverterConfig:
    """デフォルト設定を取得する"""
    return ConverterConfig()


def load_config(path: Path) -> ConverterConfig:
    """設定ファイルを読み込む

    Args:
        path: 設定ファイルパス

    Returns:
        ConverterConfig: 読み込んだ設定（デフォルトとマージ済み）

    Raises:
        ConfigError: ファイル読み込みまたはパースエラー
    """
    if not path.exists():
        raise ConfigError(f"設定ファイルが見つかりません: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML解析エラー: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("設定ファイルはYAMLのマッピング形式である必要があります")

    default = get_default_config()
    root_dir = data.get("root_dir")

    return ConverterConfig(
        root_dir=Path(root_dir) if root_dir is not None else default.root_dir,
        graphics=_merge_job_config(data.get("graphics", {}), default.graphics),
        text=_merge_job_config(data.get("text", {}), default.text),
        workers=_parse_workers(data.get("workers", default.workers)),
        line_ending=_parse_line_ending(data.get("line_ending")),
    )


def _merge_job_config(data: dict[str, Any], default: JobConfig) -> JobConfig:
    """ジョブ設定をマージする"""
    if not isinstance(data, dict):
        return default
    return JobConfig(
        input_dir=str(data.get("input_dir", default.input_dir)),
        input_ext=str(data.get("input_ext", default.input_ext)),
        output_dir=str(data.get("output_dir", default.output_dir)),
        output_ext=str(data.get("output_ext", default.output_ext)),
    )


def _parse_workers(value: Any) -> int | None:
    """ワーカー数をパースする"""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"workersは1以上の整数である必要があります: {value!r}")
    return value


def _parse_line_ending(name: Any) -> str:
    """改行コード名をパースする"""
    if name is None:
        return os.linesep
    key = str(name).lower()
    if key not in LINE_ENDINGS:
        choices = ", ".join(LINE_ENDINGS)
        raise ConfigError(f"不明な改行コードです: {name}（{choices} のいずれか）")
    return LINE_ENDINGS[key]
