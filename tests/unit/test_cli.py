"""Unit tests for jaded.cli.main: the click command group."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from jaded.cli.main import cli, decode_command
from jaded.parser.parser import ParserOptions
from jaded.stream.markers import Marker


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def hello_file(tmp_path: Path, hello_world_stream: bytes) -> Path:
    path = tmp_path / "hello.obj"
    path.write_bytes(hello_world_stream)
    return path


# ===========================================================================
# decode
# ===========================================================================


class TestDecode:
    def test_json_to_file(self, runner: CliRunner, hello_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.json"
        result = runner.invoke(cli, ["decode", str(hello_file), "--output", str(out)])
        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text(encoding="utf-8")) == {
            "kind": "ObjectContent",
            "value": {"kind": "String", "value": "helloWorld"},
        }

    def test_yaml_to_file(self, runner: CliRunner, boxed_integer_stream: bytes, tmp_path: Path) -> None:
        source = tmp_path / "int.obj"
        source.write_bytes(boxed_integer_stream)
        out = tmp_path / "out.yaml"
        result = runner.invoke(cli, ["decode", str(source), "--format", "yaml", "-o", str(out)])
        assert result.exit_code == 0, result.output
        data = yaml.safe_load(out.read_text(encoding="utf-8"))
        assert data["value"]["fields"]["value"]["value"] == 42

    def test_stdout(self, runner: CliRunner, hello_file: Path) -> None:
        result = runner.invoke(cli, ["decode", str(hello_file)])
        assert result.exit_code == 0
        assert "helloWorld" in result.output

    def test_hex_input(self, runner: CliRunner, tmp_path: Path, hello_world_stream: bytes) -> None:
        source = tmp_path / "hello.hex"
        source.write_text(hello_world_stream.hex(" ") + "\n", encoding="ascii")
        out = tmp_path / "out.json"
        result = runner.invoke(cli, ["decode", str(source), "--hex", "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert "helloWorld" in out.read_text(encoding="utf-8")

    def test_all_items(self, runner: CliRunner, tmp_path: Path, stream_builder) -> None:
        source = tmp_path / "many.obj"
        source.write_bytes(stream_builder().string("a").string("b").build())
        out = tmp_path / "out.json"
        result = runner.invoke(cli, ["decode", str(source), "--all", "-o", str(out)])
        assert result.exit_code == 0, result.output
        items = json.loads(out.read_text(encoding="utf-8"))
        assert [item["value"]["value"] for item in items] == ["a", "b"]

    def test_max_depth(self, runner: CliRunner, boxed_integer_stream: bytes, tmp_path: Path) -> None:
        source = tmp_path / "int.obj"
        source.write_bytes(boxed_integer_stream)
        result = runner.invoke(cli, ["decode", str(source), "--max-depth", "1"])
        assert result.exit_code == 1
        assert "Decode error" in result.output

    def test_not_java(self, runner: CliRunner, tmp_path: Path) -> None:
        source = tmp_path / "text.txt"
        source.write_bytes(b"plain text")
        result = runner.invoke(cli, ["decode", str(source)])
        assert result.exit_code == 1
        assert "Decode error" in result.output

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["decode", str(tmp_path / "nope.obj")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_bad_hex(self, runner: CliRunner, tmp_path: Path) -> None:
        source = tmp_path / "bad.hex"
        source.write_text("zz", encoding="ascii")
        result = runner.invoke(cli, ["decode", str(source), "--hex"])
        assert result.exit_code == 1
        assert "hex" in result.output

    def test_trailing_data_warning(
        self, runner: CliRunner, tmp_path: Path, stream_builder, caplog: pytest.LogCaptureFixture
    ) -> None:
        source = tmp_path / "many.obj"
        source.write_bytes(stream_builder().string("a").string("b").build())
        result = runner.invoke(cli, ["decode", str(source), "-o", str(tmp_path / "o.json")])
        assert result.exit_code == 0, result.output
        assert "Ignoring data" in caplog.text

    def test_no_warn_trailing(
        self, runner: CliRunner, tmp_path: Path, stream_builder, caplog: pytest.LogCaptureFixture
    ) -> None:
        source = tmp_path / "many.obj"
        source.write_bytes(stream_builder().string("a").string("b").build())
        result = runner.invoke(
            cli, ["decode", str(source), "--no-warn-trailing", "-o", str(tmp_path / "o.json")]
        )
        assert result.exit_code == 0, result.output
        assert "Ignoring data" not in caplog.text

    def test_max_nodes(self, runner: CliRunner, tmp_path: Path, stream_builder) -> None:
        source = tmp_path / "array.obj"
        source.write_bytes(
            stream_builder()
            .marker(Marker.ARRAY)
            .class_desc("[Ljava.lang.String;")
            .null()
            .u32(2)
            .string("a")
            .string("b")
            .build()
        )
        result = runner.invoke(cli, ["decode", str(source), "--max-nodes", "2"])
        assert result.exit_code == 1
        assert "Decode error" in result.output

    def test_option_defaults(self) -> None:
        defaults = {param.name: param.default for param in decode_command.params}
        options = ParserOptions()
        assert defaults["max_depth"] == options.max_depth
        assert defaults["max_nodes"] == options.max_nodes
        assert defaults["warn_trailing"] is options.warn_trailing_data

    def test_verbose_logging(self, runner: CliRunner, hello_file: Path, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["--verbose", "decode", str(hello_file), "-o", str(tmp_path / "o.json")])
        assert result.exit_code == 0, result.output


# ===========================================================================
# render
# ===========================================================================


class TestRender:
    def test_text(self, runner: CliRunner, tmp_path: Path) -> None:
        source = tmp_path / "text.txt"
        source.write_bytes(b"just text")
        result = runner.invoke(cli, ["render", str(source)])
        assert result.exit_code == 0
        assert "just text" in result.output

    def test_binary(self, runner: CliRunner, tmp_path: Path) -> None:
        source = tmp_path / "blob.bin"
        source.write_bytes(b"a\xff")
        result = runner.invoke(cli, ["render", str(source)])
        assert result.exit_code == 0
        assert "a\\xff" in result.output

    def test_java(self, runner: CliRunner, hello_file: Path) -> None:
        result = runner.invoke(cli, ["render", str(hello_file), "--format", "yaml"])
        assert result.exit_code == 0
        assert "helloWorld" in result.output


# ===========================================================================
# version
# ===========================================================================


class TestVersion:
    def test_version_command(self, runner: CliRunner, expected_version: str) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert expected_version in result.output
