"""
Tests for the command-line interface.

Settings are replaced with file-logging-free defaults so the tests never
write to the user's data directory.
"""

import json
import logging

import pytest

from orgchart.cli.main import create_parser, main
from orgchart.config.settings import AppSettings


@pytest.fixture(autouse=True)
def cli_settings(monkeypatch):
    """Use quiet in-memory settings for every CLI run."""
    settings = AppSettings(log_to_file=False, log_file_path=None, log_level=logging.WARNING)
    monkeypatch.setattr("orgchart.cli.main.get_settings", lambda: settings)
    return settings


class TestParser:
    """Tests for argument parsing."""

    def test_tree_arguments(self, tmp_path):
        """Test parsing the tree command with collapsed ids."""
        args = create_parser().parse_args(["tree", str(tmp_path / "org.csv"), "--collapse", "a", "b"])

        assert args.command == "tree"
        assert args.collapse == ["a", "b"]

    def test_no_command_prints_help(self, capsys):
        """Test that running without a command shows help and succeeds."""
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out


class TestCommands:
    """Tests for the CLI commands."""

    def test_info(self, sample_csv_file, capsys):
        """Test the info summary."""
        assert main(["info", str(sample_csv_file)]) == 0

        out = capsys.readouterr().out
        assert "Records: 6" in out
        assert "Nodes in chart: 5" in out
        assert "Roots: 1" in out

    def test_validate_ok(self, sample_csv_file, capsys):
        """Test validating a usable file."""
        assert main(["validate", str(sample_csv_file)]) == 0
        assert "5 node(s)" in capsys.readouterr().out

    def test_validate_all_isolated(self, tmp_path):
        """Test that a file of isolated records fails validation."""
        csv_file = tmp_path / "isolated.csv"
        csv_file.write_text("id,name\na,A\nb,B\n", encoding="utf-8")

        assert main(["validate", str(csv_file)]) == 1

    def test_validate_malformed(self, tmp_path):
        """Test that a malformed file is reported with exit code 1."""
        csv_file = tmp_path / "broken.csv"
        csv_file.write_text("id,name\na,A,extra\n", encoding="utf-8")

        assert main(["validate", str(csv_file)]) == 1

    def test_tree_json(self, sample_csv_file, capsys):
        """Test printing the display tree with a collapsed node."""
        assert main(["tree", str(sample_csv_file), "--collapse", "cto"]) == 0

        tree = json.loads(capsys.readouterr().out)
        assert tree["attributes"]["id"] == "ceo"
        cto = tree["children"][0]
        assert cto["attributes"]["collapsed"] == "true"
        assert "children" not in cto

    def test_tree_unknown_collapse_id(self, sample_csv_file):
        """Test that collapsing an unknown id fails cleanly."""
        assert main(["tree", str(sample_csv_file), "--collapse", "ghost"]) == 1

    def test_export(self, tmp_path, capsys):
        """Test that export writes parents before children."""
        source = tmp_path / "in.csv"
        source.write_text("id,name,parentId\nb,Bob,a\na,Alice,\nx,Loner,\n", encoding="utf-8")
        output = tmp_path / "out.csv"

        assert main(["export", str(source), str(output)]) == 0

        assert output.read_text(encoding="utf-8").splitlines() == [
            "id,name,title,department,parentId,imageUrl",
            "a,Alice,,,,",
            "b,Bob,,,a,",
        ]

    def test_export_with_delimiter_round_trip(self, tmp_path, capsys):
        """Test that -d is used for writing and the output reads back with it."""
        source = tmp_path / "in.csv"
        source.write_text("id;name;parentId\na;Alice;\nb;Bob;a\n", encoding="utf-8")
        output = tmp_path / "out.csv"

        assert main(["-d", ";", "export", str(source), str(output)]) == 0

        assert output.read_text(encoding="utf-8").splitlines() == [
            "id;name;title;department;parentId;imageUrl",
            "a;Alice;;;;",
            "b;Bob;;;a;",
        ]
        assert main(["-d", ";", "info", str(output)]) == 0
        assert "Nodes in chart: 2" in capsys.readouterr().out

    def test_tsv_input(self, tmp_path, capsys):
        """Test that .tsv input is split on tabs."""
        source = tmp_path / "in.tsv"
        source.write_text("id\tname\tparentId\na\tAlice\t\nb\tBob\ta\n", encoding="utf-8")

        assert main(["info", str(source)]) == 0
        assert "Nodes in chart: 2" in capsys.readouterr().out
