"""Tests for the CLI main module."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from wish_xml.cli.main import (
    XMLProcessor,
    create_argument_parser,
    format_results,
    load_config,
    main,
)
from wish_xml.shared.config import ConfigValidationError, XMLConfig

DOCUMENT = '<root><a x="1">hi</a><b k="v"><c/></b></root>'


@pytest.fixture
def xml_file(tmp_path: Path) -> Path:
    path = tmp_path / "doc.xml"
    path.write_text(DOCUMENT, encoding="utf-8")
    return path


@pytest.fixture
def bad_file(tmp_path: Path) -> Path:
    path = tmp_path / "bad.xml"
    path.write_text("<root><a></root>", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep the CLI from replacing the test run's log handlers."""
    with patch("wish_xml.cli.main.configure_logging") as mock_configure:
        yield mock_configure


class TestArgumentParser:
    """Test argument parsing."""

    def test_check_arguments(self) -> None:
        """Test the check sub-command."""
        args = create_argument_parser().parse_args(["check", "a.xml", "b.xml", "-f", "json"])

        assert args.command == "check"
        assert args.paths == [Path("a.xml"), Path("b.xml")]
        assert args.format == "json"

    def test_global_options(self) -> None:
        """Test options shared by all sub-commands."""
        args = create_argument_parser().parse_args(
            ["--verbose", "--config", "c.json", "format", "a.xml"]
        )

        assert args.verbose is True
        assert args.config == Path("c.json")
        assert args.output is None


class TestLoadConfig:
    """Test configuration loading."""

    def test_default(self) -> None:
        """Test that no path gives the default preset."""
        assert load_config(None) == XMLConfig.default()

    def test_from_file(self, tmp_path: Path) -> None:
        """Test loading a JSON configuration file."""
        path = tmp_path / "config.json"
        path.write_text(XMLConfig.large_documents().to_json(), encoding="utf-8")

        assert load_config(path).tree.max_depth == 300

    def test_invalid_file(self, tmp_path: Path) -> None:
        """Test a malformed configuration file."""
        path = tmp_path / "config.json"
        path.write_text('{"tree": {"max_depth": 0}}', encoding="utf-8")

        with pytest.raises(ConfigValidationError):
            load_config(path)


class TestXMLProcessor:
    """Test per-file checking."""

    def test_check_success(self, xml_file: Path) -> None:
        """Test statistics for a well-formed file."""
        result = XMLProcessor(XMLConfig()).check_file(xml_file)

        assert result["success"] is True
        assert result["root"] == "root"
        assert result["statistics"]["elements"] == 4
        assert result["statistics"]["attributes"] == 2
        assert result["statistics"]["max_depth"] == 2
        assert result["statistics"]["characters_read"] == len(DOCUMENT)

    def test_check_failure(self, bad_file: Path) -> None:
        """Test that parse failures are reported, not raised."""
        result = XMLProcessor(XMLConfig()).check_file(bad_file)

        assert result["success"] is False
        assert "Mismatched close tag </root>" in result["error"]

    def test_check_missing_file(self, tmp_path: Path) -> None:
        """Test a file that does not exist."""
        result = XMLProcessor(XMLConfig()).check_file(tmp_path / "absent.xml")

        assert result["success"] is False

    def test_check_undecodable_file(self, tmp_path: Path) -> None:
        """Test that bytes invalid in the configured encoding are a failure."""
        path = tmp_path / "binary.xml"
        path.write_bytes(b"<r>\xff\xfe</r>")

        result = XMLProcessor(XMLConfig()).check_file(path)

        assert result["success"] is False
        assert "utf-8" in result["error"]

    def test_characters_read_counts_raw_input(self, tmp_path: Path) -> None:
        """Test that CR LF pairs count as two characters read."""
        path = tmp_path / "crlf.xml"
        path.write_bytes(b"<r>\r\n<a/>\r\n</r>")

        result = XMLProcessor(XMLConfig()).check_file(path)

        assert result["statistics"]["characters_read"] == 15


class TestFormatResults:
    """Test result formatting."""

    def test_json(self) -> None:
        """Test JSON output."""
        results = [{"file": "a.xml", "success": False, "error": "boom"}]

        assert json.loads(format_results(results, "json")) == results

    def test_text(self) -> None:
        """Test the text summary."""
        results = [
            {"file": "a.xml", "success": False, "error": "boom"},
            {
                "file": "b.xml", "success": True, "root": "r",
                "statistics": {
                    "elements": 1, "attributes": 0, "max_depth": 0,
                    "processing_time_ms": 1.25,
                },
            },
        ]

        text = format_results(results, "text")

        assert text.startswith("Checked 2 files, 1 successful")
        assert "FAIL a.xml" in text
        assert "Error: boom" in text
        assert "OK   b.xml" in text
        assert "Root: r, Elements: 1" in text

    def test_text_empty(self) -> None:
        """Test text output without results."""
        assert format_results([], "text") == "No results to display."


class TestMain:
    """Test the command entry point."""

    def test_no_command(self, capsys: pytest.CaptureFixture) -> None:
        """Test that help is shown without a sub-command."""
        assert main([]) == 1
        assert "wish-xml" in capsys.readouterr().out

    def test_check(self, xml_file: Path, capsys: pytest.CaptureFixture) -> None:
        """Test checking a valid file."""
        assert main(["check", str(xml_file), "--format", "json"]) == 0

        results = json.loads(capsys.readouterr().out)
        assert results[0]["success"] is True

    def test_check_with_failure(
        self, xml_file: Path, bad_file: Path, capsys: pytest.CaptureFixture
    ) -> None:
        """Test that any failed file gives exit code 1."""
        assert main(["check", str(xml_file), str(bad_file)]) == 1
        assert "1 successful" in capsys.readouterr().out

    def test_format_stdout(self, xml_file: Path, capsys: pytest.CaptureFixture) -> None:
        """Test re-serializing to standard output."""
        assert main(["format", str(xml_file)]) == 0

        out = capsys.readouterr().out
        assert out.startswith('<?xml version="1.0" standalone="yes"?>\n')
        assert '  <a x="1">hi</a>\n' in out

    def test_format_output_file(self, xml_file: Path, tmp_path: Path) -> None:
        """Test re-serializing into a file."""
        output = tmp_path / "formatted.xml"

        assert main(["format", str(xml_file), "-o", str(output)]) == 0
        assert "    <c/>\n" in output.read_text(encoding="utf-8")

    def test_format_invalid(self, bad_file: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that parse errors are reported with exit code 1."""
        assert main(["format", str(bad_file)]) == 1
        assert "Mismatched close tag" in capsys.readouterr().err

    def test_check_undecodable(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that an undecodable file is reported, not raised."""
        path = tmp_path / "binary.xml"
        path.write_bytes(b"<r>\xff\xfe</r>")

        assert main(["check", str(path)]) == 1
        assert "FAIL" in capsys.readouterr().out

    def test_format_undecodable(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that decoding errors exit with code 1."""
        path = tmp_path / "binary.xml"
        path.write_bytes(b"<r>\xff\xfe</r>")

        assert main(["format", str(path)]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_find_by_tag(self, xml_file: Path, capsys: pytest.CaptureFixture) -> None:
        """Test printing the first element with a name."""
        assert main(["find", str(xml_file), "--tag", "a"]) == 0
        assert capsys.readouterr().out == '<a x="1">hi</a>\n'

    def test_find_by_attribute(self, xml_file: Path, capsys: pytest.CaptureFixture) -> None:
        """Test printing the first element with an attribute."""
        assert main(["find", str(xml_file), "--attribute", "k"]) == 0
        assert capsys.readouterr().out == '<b k="v">\n  <c/>\n</b>\n'

    def test_find_by_tag_and_attribute(
        self, xml_file: Path, capsys: pytest.CaptureFixture
    ) -> None:
        """Test that tag and attribute must match on one element."""
        assert main(["find", str(xml_file), "--tag", "a", "--attribute", "k"]) == 1
        assert "No matching element" in capsys.readouterr().err

    def test_find_requires_criteria(self, xml_file: Path) -> None:
        """Test that find needs --tag or --attribute."""
        assert main(["find", str(xml_file)]) == 2

    def test_settings(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test dumping a settings file."""
        path = tmp_path / "planner.set"
        path.write_text("& PLAN\nUnits = msw\n/\n", encoding="utf-8")

        assert main(["settings", str(path)]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data == {
            "file_id": "PLAN",
            "settings": [{"label": "Units", "value": "msw"}],
        }

    def test_settings_missing(self, tmp_path: Path) -> None:
        """Test a settings file that does not exist."""
        assert main(["settings", str(tmp_path / "absent.set")]) == 1

    def test_bad_config(self, xml_file: Path, tmp_path: Path) -> None:
        """Test that an unusable configuration file exits with code 2."""
        config = tmp_path / "config.json"
        config.write_text("not json", encoding="utf-8")

        assert main(["--config", str(config), "check", str(xml_file)]) == 2

    def test_logging_levels(self, xml_file: Path, no_logging_setup) -> None:
        """Test that --verbose and --quiet choose the logging level."""
        main(["--verbose", "check", str(xml_file)])
        no_logging_setup.assert_called_with("DEBUG")

        main(["--quiet", "check", str(xml_file)])
        no_logging_setup.assert_called_with("ERROR")

        main(["check", str(xml_file)])
        no_logging_setup.assert_called_with("WARNING")
