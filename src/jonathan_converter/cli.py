"""CLI entry point for jonathan_converter."""

import dataclasses
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from jonathan_converter import __version__
from jonathan_converter.config import ConfigError, get_default_config, load_config
from jonathan_converter.logger import ConversionLogger, LogConfig, VerboseLevel
from jonathan_converter.pipeline import AssetPipeline
from jonathan_converter.types import ExitCode

EPILOG = (
    "GRAFIKディレクトリのPCXファイルはPNGに変換され、新しいディレクトリGRAFIK_PNGに書き出されます。\n\n"
    "TEXTディレクトリのTCTファイルはUTF-8テキストに変換され、新しいディレクトリTEXT_TXTに書き出されます。"
)

app = typer.Typer(help="ゲーム『Jonathan』のグラフィックとテキストを変換するCLIツール")
console = Console()
err_console = Console(stderr=True)


def _pause() -> None:
    """Enterキーが押されるまで待機する（対話端末でない場合は何もしない）"""
    typer.pause("続行するにはEnterキーを押してください...")


def version_callback(value: bool) -> None:
    """バージョン表示コールバック"""
    if value:
        typer.echo(f"jonathan-converter {__version__}")
        raise typer.Exit(ExitCode.SUCCESS)


@app.command(epilog=EPILOG)
def main(
    directory: Annotated[
        Path | None,
        typer.Argument(help="ゲームのルートディレクトリ（省略時はカレントディレクトリ）"),
    ] = None,
    config_file: Annotated[
        Path | None, typer.Option("-c", "--config", help="設定ファイル（YAML）")
    ] = None,
    verbose: Annotated[int, typer.Option("-v", "--verbose", count=True, help="詳細ログ出力")] = 0,
    quiet: Annotated[bool, typer.Option("-q", "--quiet", help="エラーのみ出力")] = False,
    log_file: Annotated[Path | None, typer.Option(help="ログファイル出力先")] = None,
    workers: Annotated[int | None, typer.Option(min=1, help="並列ワーカー数")] = None,
    no_pause: Annotated[bool, typer.Option("--no-pause", help="終了前に入力を待たない")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="カラー出力を無効化")] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="バージョンを表示する",
        ),
    ] = False,
) -> None:
    """GRAFIKとTEXTディレクトリのアセットを変換する"""
    console.print(f"jonathan-converter {__version__}", highlight=False)
    console.print()

    try:
        config = load_config(config_file) if config_file else get_default_config()
    except ConfigError as e:
        err_console.print(
            f"エラー: {e}", style="red", markup=False, highlight=False, soft_wrap=True
        )
        raise typer.Exit(ExitCode.INVALID_INPUT) from e

    overrides: dict[str, object] = {}
    if directory is not None:
        overrides["root_dir"] = directory
    if workers is not None:
        overrides["workers"] = workers
    config = dataclasses.replace(config, **overrides)

    if quiet:
        level = VerboseLevel.QUIET
    else:
        level = VerboseLevel(min(verbose, VerboseLevel.DEBUG))
    log_config = LogConfig(
        verbose_level=level,
        log_file=log_file,
        use_color=not no_color and sys.stderr.isatty(),
    )

    with ConversionLogger(log_config) as logger:
        result = AssetPipeline(config, logger).run()
        logger.verbose(f"処理時間: {result.statistics['total_time_seconds']}秒")

    if not result.success:
        # 中断の原因はパイプラインがログに出力済み
        if not no_pause:
            _pause()
        raise typer.Exit(ExitCode.ERROR)

    if result.failed_files:
        console.print(
            f"{result.failed_files}件のファイルを変換できませんでした",
            style="yellow",
            highlight=False,
        )
    console.print("変換が完了しました", style="green", highlight=False)
    if not no_pause:
        _pause()
    raise typer.Exit(ExitCode.SUCCESS)
