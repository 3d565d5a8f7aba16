"""Tests for the bundleconsole command line.

Version: 0.1.0
"""

from __future__ import annotations

import json

import pytest
import yaml

from bundleconsole.cli.commands import to_plain_text
from bundleconsole.cli.main import build_parser, main


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def snapshot_file(tmp_path, runtime_data):
    path = tmp_path / "runtime.yaml"
    path.write_text(yaml.safe_dump(runtime_data), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    monkeypatch.setattr("bundleconsole.cli.main.apply_logging_config", lambda *args, **kwargs: "INFO")


def run(tmp_path, snapshot_file, *args):
    main(["--root", str(tmp_path), "--snapshot", str(snapshot_file), *args])


# =============================================================================
# Parser
# =============================================================================

class TestParser:
    def test_action_choices(self):
        parser = build_parser()
        args = parser.parse_args(["action", "3", "start"])
        assert (args.identifier, args.action) == ("3", "start")
        with pytest.raises(SystemExit):
            parser.parse_args(["action", "3", "explode"])

    def test_serve_options(self):
        args = build_parser().parse_args(["serve", "--port", "9000"])
        assert args.port == 9000
        assert args.host is None


# =============================================================================
# Commands
# =============================================================================

class TestCommands:
    def test_list(self, tmp_path, snapshot_file, capsys):
        run(tmp_path, snapshot_file, "list")
        out = capsys.readouterr().out
        assert "Total : 5 Bundles" in out
        assert "com.acme.core" in out
        assert "System Bundle" in out

    def test_list_json(self, tmp_path, snapshot_file, capsys):
        run(tmp_path, snapshot_file, "list", "--json")
        data = json.loads(capsys.readouterr().out)
        assert [b["id"] for b in data["data"]] == [1, 2, 3, 4, 0]

    def test_show(self, tmp_path, snapshot_file, capsys):
        run(tmp_path, snapshot_file, "show", "com.acme.web:2.1.0")
        out = capsys.readouterr().out
        assert "com.acme.web (3) - Installed" in out
        assert "com.acme.web.a,version=2.1.0" in out
        assert "<br/>" not in out

    def test_show_json(self, tmp_path, snapshot_file, capsys):
        run(tmp_path, snapshot_file, "show", "1", "--json")
        assert json.loads(capsys.readouterr().out)["bundleId"] == 1

    def test_show_unknown(self, tmp_path, snapshot_file, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run(tmp_path, snapshot_file, "show", "99")
        assert exc_info.value.code == 1
        assert "No bundle matches '99'" in capsys.readouterr().err

    def test_action(self, tmp_path, snapshot_file, capsys):
        run(tmp_path, snapshot_file, "action", "2", "start")
        assert "com.acme.web (2) is now Active" in capsys.readouterr().out

    def test_uninstall_action(self, tmp_path, snapshot_file, capsys):
        run(tmp_path, snapshot_file, "action", "4", "uninstall")
        assert json.loads(capsys.readouterr().out) == {"bundleId": 4}

    def test_no_snapshot(self, tmp_path, capsys):
        with pytest.raises(SystemExit):
            main(["--root", str(tmp_path), "list"])
        assert "No snapshot configured" in capsys.readouterr().err


class TestPlainText:
    def test_markup_is_dropped(self):
        value = '<a href="http://x" target="_blank">http://x</a>'
        assert to_plain_text(value) == ["http://x"]

    def test_lines_are_split(self):
        assert to_plain_text("a<br/>b<br/>") == ["a", "b"]
