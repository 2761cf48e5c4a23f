"""BaseConverterおよび共通データ型のテスト"""

from pathlib import Path

import pytest

from jonathan_converter.converter.base import (
    BaseConverter,
    ConversionError,
    ConversionResult,
    ConversionStatus,
    FileConversionError,
    format_error_chain,
)


class TestConversionStatus:
    """ConversionStatus列挙型のテスト"""

    @pytest.mark.parametrize(
        "status,value",
        [
            pytest.param(ConversionStatus.SUCCESS, "success", id="正常系: SUCCESS"),
            pytest.param(ConversionStatus.FAILED, "failed", id="正常系: FAILED"),
        ],
    )
    def test_values(self, status: ConversionStatus, value: str) -> None:
        """ステータスの値"""
        assert status.value == value


class TestConversionResult:
    """ConversionResultデータクラスのテスト"""

    def test_defaults(self, tmp_path: Path) -> None:
        """正常系: デフォルト値のテスト"""
        result = ConversionResult(
            source_path=tmp_path / "A.PCX",
            dest_path=tmp_path / "A.PNG",
            status=ConversionStatus.SUCCESS,
        )

        assert result.message == ""
        assert result.error is None
        assert result.bytes_before == 0
        assert result.bytes_after == 0
        assert result.is_success is True

    def test_failed_is_not_success(self, tmp_path: Path) -> None:
        """正常系: FAILEDはis_successがFalse"""
        result = ConversionResult(
            source_path=tmp_path / "A.PCX",
            dest_path=None,
            status=ConversionStatus.FAILED,
        )

        assert result.is_success is False

    def test_is_frozen(self, tmp_path: Path) -> None:
        """異常系: 変更できない"""
        result = ConversionResult(
            source_path=tmp_path / "A.PCX",
            dest_path=None,
            status=ConversionStatus.FAILED,
        )

        with pytest.raises(AttributeError):
            result.message = "changed"  # type: ignore[misc]


class TestFormatErrorChain:
    """format_error_chain関数のテスト"""

    def test_single_error(self) -> None:
        """正常系: 原因のない例外は1行"""
        assert format_error_chain(ValueError("壊れています")) == "error: 壊れています"

    def test_chained_errors(self, tmp_path: Path) -> None:
        """正常系: 原因の連鎖をcaused by行として出力する"""
        source = tmp_path / "A.PCX"
        dest = tmp_path / "A.PNG"
        try:
            try:
                raise OSError("disk full")
            except OSError as inner:
                raise ConversionError("書き込めません") from inner
        except ConversionError as middle:
            error = FileConversionError(source, dest)
            error.__cause__ = middle

        lines = format_error_chain(error).splitlines()

        assert lines[0].startswith("error: ")
        assert str(source) in lines[0]
        assert str(dest) in lines[0]
        assert lines[1] == "caused by: 書き込めません"
        assert lines[2] == "caused by: disk full"


class TestFileConversionError:
    """FileConversionErrorのテスト"""

    def test_attributes(self, tmp_path: Path) -> None:
        """正常系: 入力・出力パスを保持する"""
        error = FileConversionError(tmp_path / "A.TCT", tmp_path / "A.TXT")

        assert error.source == tmp_path / "A.TCT"
        assert error.dest == tmp_path / "A.TXT"
        assert isinstance(error, ConversionError)


class TestBaseConverter:
    """BaseConverter抽象クラスのテスト"""

    def test_cannot_instantiate(self) -> None:
        """異常系: 抽象クラスはインスタンス化できない"""
        with pytest.raises(TypeError):
            BaseConverter()  # type: ignore[abstract]

    def test_read_source_wraps_os_error(self, tmp_path: Path) -> None:
        """異常系: 読み込み失敗はConversionErrorに変換される"""

        class EchoConverter(BaseConverter):
            def convert(self, source: Path, dest: Path) -> ConversionResult:
                dest.write_bytes(self._read_source(source))
                return ConversionResult(source, dest, ConversionStatus.SUCCESS)

        with pytest.raises(ConversionError) as exc_info:
            EchoConverter().convert(tmp_path / "missing", tmp_path / "out")

        assert isinstance(exc_info.value.__cause__, FileNotFoundError)
