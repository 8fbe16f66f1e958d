"""Unit tests for the probe command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from bond_compiler.cli import cli


def test_probe_msearch_body(sample_config: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["-q", "--config", str(sample_config), "probe", "--compact", "keyword", "ocean", "ice"],
    )
    assert result.exit_code == 0

    body = json.loads(result.output)
    assert body[0] == {"index": "records"}
    assert body[1] == {"query": {"match_phrase": {"keyword_agg": {"query": "ocean"}}}, "size": 1}
    assert len(body) == 4


def test_probe_table(sample_config: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli,
        [
            "-q",
            "--no-color",
            "--config",
            str(sample_config),
            "probe",
            "--table",
            "keyword",
            "ocean",
        ],
    )
    assert result.exit_code == 0
    assert "records" in result.output
    assert "ocean" in result.output


def test_probe_requires_values() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["probe", "keyword"])
    assert result.exit_code != 0
