from __future__ import annotations

import json

from typer.testing import CliRunner

from cantor import cli
from cantor.config import OUTPUT_FORMATS


def _invoke(args: list[str]):
    return CliRunner().invoke(cli.app, args)


def test_cli_help_lists_commands() -> None:
    result = _invoke(["--help"])
    assert result.exit_code == 0
    for command_name in ("widths", "width", "inspect"):
        assert command_name in result.output


def test_widths_table() -> None:
    result = _invoke(["widths", "--max-bits", "9"])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert len(lines) == 10
    assert lines[0].split() == ["0", "W0", "0", "bytes"]
    assert lines[8].split() == ["8", "W8", "1", "bytes"]
    assert lines[9].split() == ["9", "W16", "2", "bytes"]


def test_widths_json() -> None:
    result = _invoke(["widths", "--max-bits", "2", "--format", "json"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["entries"] == [
        {"bits": 0, "width": "W0", "width_bits": 0, "byte_size": 0},
        {"bits": 1, "width": "W8", "width_bits": 8, "byte_size": 1},
        {"bits": 2, "width": "W8", "width_bits": 8, "byte_size": 1},
    ]


def test_widths_defaults_come_from_config(write_config) -> None:
    config_path = write_config('[cli]\nformat = "json"\nmax_bits = 1')
    result = _invoke(["widths", "--config", str(config_path)])
    assert result.exit_code == 0, result.output
    assert len(json.loads(result.output)["entries"]) == 2


def test_width_for_seven_values() -> None:
    result = _invoke(["width", "7"])
    assert result.exit_code == 0, result.output
    assert "bits:   3" in result.output
    assert "width:  W8 (1 bytes)" in result.output
    assert "bitmap: W8" in result.output


def test_width_json_for_large_count() -> None:
    result = _invoke(["width", str(1 << 64), "--format", "json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {
        "count": 1 << 64,
        "bits": 64,
        "width": "W64",
        "byte_size": 8,
        "bitmap_width": None,
    }


def test_width_rejects_counts_past_the_widest_width() -> None:
    result = _invoke(["width", str((1 << 128) + 1)])
    assert result.exit_code != 0


def test_unknown_format_is_rejected() -> None:
    result = _invoke(["width", "7", "--format", "xml"])
    assert result.exit_code != 0


def test_every_configured_format_is_accepted() -> None:
    for fmt in OUTPUT_FORMATS:
        result = _invoke(["width", "7", "--format", fmt.upper()])
        assert result.exit_code == 0, fmt


def test_inspect_registered_sum() -> None:
    result = _invoke(["inspect", "tests.sample_types:Tile", "--values", "2"])
    assert result.exit_code == 0, result.output
    assert "count:  25" in result.output
    assert "width:  W8 (1 bytes)" in result.output
    assert "bitmap: W32" in result.output
    assert "Empty()" in result.output
    assert "Horizontal(color=<Color.RED: 'red'>)" in result.output
    assert "Horizontal(color=<Color.GREEN" not in result.output


def test_inspect_json() -> None:
    result = _invoke(["inspect", "tests.sample_types:Color", "--format", "json"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["count"] == 3
    assert payload["values"] == [
        "<Color.RED: 'red'>",
        "<Color.GREEN: 'green'>",
        "<Color.BLUE: 'blue'>",
    ]


def test_inspect_large_product_has_no_bitmap() -> None:
    result = _invoke(["inspect", "tests.sample_types:Pixel", "--values", "0"])
    assert result.exit_code == 0, result.output
    assert "count:  4096" in result.output
    assert "bitmap: unsupported" in result.output


def test_inspect_rejects_bad_targets() -> None:
    for target in ("no_colon", "tests.sample_types:Missing", "not_a_module_xyz:Name"):
        result = _invoke(["inspect", target])
        assert result.exit_code != 0, target
    result = _invoke(["inspect", "tests.sample_types:Tile.__name__"])
    assert result.exit_code != 0
