"""Tests for tourist.cli module."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Isolate CLI imports from .env loading side effects
with patch("tourist.cli_config.load_config"):
    from tourist.cli import _config_from_args, _parse_args, main

from tourist.cli_config import env_path, load_config
from tourist.pipeline import PageAnalysis
from tourist.score import BloatScore
from tourist.stats import DocumentStats


class TestParseArgs:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TOURIST_OUT", raising=False)
        monkeypatch.delenv("TOURIST_VIEWPORTS", raising=False)
        args = _parse_args(["--url", "https://a.test/"])
        assert args.url == "https://a.test/"
        assert args.crawl is True
        assert args.headless is True
        assert args.continue_crawl is False
        assert args.out == Path("./out")
        assert args.viewports == Path("./viewports.json")
        assert args.crawl_limit == 1000
        assert args.viewports_limit == 1

    def test_flags(self):
        args = _parse_args(
            [
                "--urls-file",
                "urls.json",
                "--no-crawl",
                "--no-headless",
                "--continue",
                "--desktop",
                "--dry-run",
                "--crawl-limit",
                "5",
                "--viewports-limit",
                "2",
            ]
        )
        assert args.urls_file == Path("urls.json")
        assert args.crawl is False
        assert args.headless is False
        assert args.continue_crawl is True
        assert args.desktop is True
        assert args.dry_run is True
        assert args.crawl_limit == 5
        assert args.viewports_limit == 2

    def test_env_defaults(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TOURIST_OUT", str(tmp_path / "results"))
        args = _parse_args(["--url", "https://a.test/"])
        assert args.out == tmp_path / "results"

    def test_url_required(self):
        with pytest.raises(SystemExit):
            _parse_args([])

    def test_url_and_file_exclusive(self):
        with pytest.raises(SystemExit):
            _parse_args(["--url", "https://a.test/", "--urls-file", "u.json"])

    def test_config_from_args(self):
        args = _parse_args(["--url", "https://a.test/", "--out", "o", "--timeout", "3"])
        config = _config_from_args(args)
        assert config.out == Path("o")
        assert config.navigation_timeout == 3.0


class TestMain:
    def test_no_crawl_prints_summary(self, tmp_path, capsys):
        stats = DocumentStats()
        result = PageAnalysis(
            url="https://a.test/", status="success", stats=stats, score=BloatScore(1.0, 0.5)
        )
        with patch("tourist.cli.analyse_async", AsyncMock(return_value=[result])) as run:
            code = main(["--url", "https://a.test/", "--no-crawl", "--out", str(tmp_path)])
        assert code == 0
        urls, config, devices = run.await_args.args
        assert urls == ["https://a.test/"]
        assert config.crawl is False
        assert devices == []
        out = capsys.readouterr().out
        assert "https://a.test/" in out
        assert "Web Bloat Score (AFT): 1.00, Full page: 0.50" in out

    def test_json_output_includes_failures(self, tmp_path, capsys):
        results = [PageAnalysis(url="https://a.test/", status="failed", error_message="boom")]
        with patch("tourist.cli.analyse_async", AsyncMock(return_value=results)):
            code = main(["--url", "https://a.test/", "--no-crawl", "--json"])
        assert code == 1
        data = json.loads(capsys.readouterr().out)
        assert data[0]["status"] == "failed"
        assert data[0]["error_message"] == "boom"

    def test_nothing_to_do_is_success(self, tmp_path):
        with patch("tourist.cli.analyse_async", AsyncMock(return_value=[])):
            assert main(["--url", "https://a.test/", "--no-crawl"]) == 0

    def test_crawl_loads_devices(self, tmp_path):
        with patch("tourist.cli.analyse_async", AsyncMock(return_value=[])) as run:
            main(["--url", "https://a.test/", "--desktop", "--out", str(tmp_path)])
        devices = run.await_args.args[2]
        assert [d.short_name for d in devices] == ["desktop"]

    def test_missing_urls_file(self, tmp_path):
        assert main(["--urls-file", str(tmp_path / "missing.json"), "--no-crawl"]) == 1

    def test_urls_file_truncated(self, tmp_path):
        urls_file = tmp_path / "urls.json"
        urls_file.write_text(json.dumps(["https://a.test/", "https://b.test/"]))
        with patch("tourist.cli.analyse_async", AsyncMock(return_value=[])) as run:
            main(["--urls-file", str(urls_file), "--no-crawl", "--crawl-limit", "1"])
        assert run.await_args.args[0] == ["https://a.test/"]

    def test_keyboard_interrupt(self):
        def _interrupt(coro):
            coro.close()
            raise KeyboardInterrupt()

        with patch("tourist.cli.asyncio.run", side_effect=_interrupt):
            assert main(["--url", "https://a.test/", "--no-crawl"]) == 130

    def test_verbose_error_logs_traceback(self):
        with patch("tourist.cli.analyse_async", AsyncMock(side_effect=RuntimeError("boom"))):
            with patch("tourist.cli.logging.exception") as mock_exc:
                assert main(["--url", "https://a.test/", "--no-crawl", "-v"]) == 1
        mock_exc.assert_called_once()


class TestLoadConfig:
    def test_local_env_preferred(self, tmp_path):
        (tmp_path / ".env").write_text("TOURIST_OUT=x\n")
        load_env = MagicMock(return_value=True)
        load_config(
            config_dir=tmp_path / "cfg",
            config_env_file=tmp_path / "cfg" / ".env",
            cwd=tmp_path,
            load_env=load_env,
            copy_file=MagicMock(),
        )
        load_env.assert_called_once_with(tmp_path / ".env")

    def test_user_config_fallback(self, tmp_path):
        cfg = tmp_path / "cfg"
        cfg.mkdir()
        (cfg / ".env").write_text("")
        load_env = MagicMock(return_value=True)
        load_config(
            config_dir=cfg,
            config_env_file=cfg / ".env",
            cwd=tmp_path / "work",
            load_env=load_env,
            copy_file=MagicMock(),
        )
        load_env.assert_called_once_with(cfg / ".env")

    def test_bootstraps_from_example(self, tmp_path):
        cfg = tmp_path / "cfg"
        copy_file = MagicMock()
        load_env = MagicMock(return_value=True)
        load_config(
            config_dir=cfg,
            config_env_file=cfg / ".env",
            cwd=tmp_path,
            load_env=load_env,
            copy_file=copy_file,
        )
        assert cfg.is_dir()
        source, target = copy_file.call_args.args
        assert source.name == ".env.example"
        assert target == cfg / ".env"
        load_env.assert_called_once_with(cfg / ".env")

    def test_bootstrap_logged_on_module_logger(self, tmp_path, caplog):
        cfg = tmp_path / "cfg"
        with caplog.at_level(logging.INFO, logger="tourist.cli_config"):
            load_config(
                config_dir=cfg,
                config_env_file=cfg / ".env",
                cwd=tmp_path,
                load_env=MagicMock(return_value=True),
                copy_file=MagicMock(),
            )
        assert [r.name for r in caplog.records] == ["tourist.cli_config"]
        assert "Created config file" in caplog.text


class TestEnvPath:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("TOURIST_TEST_PATH", raising=False)
        assert env_path("TOURIST_TEST_PATH", Path("d")) == Path("d")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TOURIST_TEST_PATH", "/tmp/x")
        assert env_path("TOURIST_TEST_PATH", Path("d")) == Path("/tmp/x")
