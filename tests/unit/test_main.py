"""
Unit tests for the command-line entry point.
"""

import locale
from pathlib import Path

import pytest

from webworker import __main__ as cli
from webworker.server import WebServer


@pytest.fixture(autouse=True)
def locale_calls(monkeypatch):
    """Keep the test process locale untouched."""
    calls = []
    monkeypatch.setattr(locale, "setlocale", lambda *args: calls.append(args))
    return calls


@pytest.fixture
def argv(doc_root: Path, not_found_page: Path):
    return ["--root", str(doc_root), "--not-found-page", str(not_found_page), "--port", "0"]


@pytest.fixture
def started(monkeypatch):
    """Record WebServer.run() calls instead of serving."""
    configs = []
    monkeypatch.setattr(WebServer, "run", lambda self: configs.append(self.config))
    return configs


class TestMain:
    """Tests for main()."""

    def test_runs_server_with_arguments(self, argv, started, doc_root: Path):
        assert cli.main(argv) == 0

        assert len(started) == 1
        assert started[0].root_dir == str(doc_root)
        assert started[0].port == 0

    def test_sets_time_locale_from_environment(self, argv, started, locale_calls):
        cli.main(argv)

        assert locale_calls == [(locale.LC_TIME, "")]

    def test_unsupported_locale_keeps_running(self, argv, started, monkeypatch, capsys):
        def broken(*args):
            raise locale.Error("unsupported locale setting")

        monkeypatch.setattr(locale, "setlocale", broken)

        assert cli.main(argv) == 0
        assert len(started) == 1
        assert "C locale" in capsys.readouterr().err

    def test_invalid_config(self, argv, started, tmp_path: Path):
        argv += ["--root", str(tmp_path / "missing")]

        assert cli.main(argv) == 2
        assert started == []
