"""Tests for site writing and the build entry point."""

import asyncio
import json
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from ai_pulse import main
from ai_pulse.config import AppConfig, CategoryConfig, OutputConfig, Settings
from ai_pulse.models import BuildArtifact, Item, SourceResult
from ai_pulse.output import write_site

_CATEGORIES = [CategoryConfig(key="hn", label="Hacker News", kind="hackernews")]


def _artifact(filename: str = "2024-01-02.html") -> BuildArtifact:
    item = Item(title="GPT news", link="https://example.com/a", source="Hacker News", importance=70)
    return BuildArtifact(
        filename=filename,
        results={"hn": SourceResult(category="hn", items=[item])},
    )


# ── write_site tests ─────────────────────────────────────────────────────


class TestWriteSite:
    """输出文件测试"""

    def test_writes_pages_and_history(self, tmp_path):
        out = tmp_path / "dist"
        out.mkdir()
        for name in ("2024-01-01.html", "2024-01-03.html"):
            (out / name).write_text("old", encoding="utf-8")

        daily = write_site(_artifact(), _CATEGORIES, output_dir=str(out))

        assert daily == out / "2024-01-02.html"
        assert "GPT news" in daily.read_text(encoding="utf-8")
        assert json.loads((out / "history.json").read_text(encoding="utf-8")) == [
            "2024-01-03.html",
            "2024-01-02.html",
            "2024-01-01.html",
        ]
        index = (out / "index.html").read_text(encoding="utf-8")
        assert 'src="2024-01-02.html"' in index
        assert "2024-01-03</option>" in index

    def test_creates_output_dir(self, tmp_path):
        out = tmp_path / "nested" / "dist"
        write_site(_artifact(), _CATEGORIES, output_dir=str(out))
        assert (out / "index.html").exists()

    def test_unwritable_output_is_fatal(self, tmp_path):
        """输出目录不可用时直接抛出"""
        blocker = tmp_path / "dist"
        blocker.write_text("not a directory", encoding="utf-8")
        with pytest.raises(OSError):
            write_site(_artifact(), _CATEGORIES, output_dir=str(blocker))


# ── main entry point tests ───────────────────────────────────────────────


class TestMain:
    """入口与退出码"""

    def test_run_success_exit_zero(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        calls = []
        monkeypatch.setattr(main, "build", lambda config, settings: calls.append(config))
        assert main.run() == 0
        assert len(calls) == 1

    def test_run_failure_exit_nonzero(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        def _fail(config, settings):
            raise PermissionError("cannot write output")

        monkeypatch.setattr(main, "build", _fail)
        assert main.run() == 1

    def test_build_writes_site(self, tmp_path, monkeypatch):
        async def _fake_collect(config, settings, filename, timestamp):
            return _artifact(filename)

        monkeypatch.setattr(main, "_collect", _fake_collect)
        config = AppConfig(categories=_CATEGORIES, output=OutputConfig(dir=str(tmp_path)))

        main.build(
            config,
            Settings(deepseek_api_key=""),
            now=datetime(2024, 5, 6, 9, 0, tzinfo=timezone.utc),
        )

        assert (tmp_path / "2024-05-06.html").exists()
        assert (tmp_path / "index.html").exists()

    def test_page_date_matches_generated_time(self, tmp_path, monkeypatch):
        """文件名日期与页面生成时间取自同一 UTC 时刻"""
        calls = []

        async def _fake_collect(config, settings, filename, timestamp):
            calls.append((filename, timestamp))
            return BuildArtifact(filename=filename, timestamp=timestamp)

        monkeypatch.setattr(main, "_collect", _fake_collect)
        config = AppConfig(categories=_CATEGORIES, output=OutputConfig(dir=str(tmp_path)))
        now = datetime(2024, 5, 6, 23, 30, tzinfo=timezone.utc)

        main.build(config, Settings(deepseek_api_key=""), now=now)

        assert calls == [("2024-05-06.html", now)]
        page = (tmp_path / "2024-05-06.html").read_text(encoding="utf-8")
        assert "Generated: 2024-05-06 23:30 UTC" in page


class TestCollect:
    """LLM 客户端生命周期"""

    def _fake_llm(self, monkeypatch):
        llm = SimpleNamespace(close=AsyncMock())
        monkeypatch.setattr(main, "make_client", lambda llm_config, settings: llm)
        return llm

    def test_llm_client_closed(self, monkeypatch):
        llm = self._fake_llm(monkeypatch)
        seen = {}

        async def _fake_build(config, http_client, llm_client, **kwargs):
            seen.update(kwargs, llm_client=llm_client)
            return BuildArtifact(**kwargs)

        monkeypatch.setattr(main, "build_artifact", _fake_build)
        now = datetime(2024, 5, 6, 9, 0, tzinfo=timezone.utc)

        artifact = asyncio.run(
            main._collect(AppConfig(categories=_CATEGORIES), Settings(), "2024-05-06.html", now)
        )

        assert seen["llm_client"] is llm
        assert artifact.timestamp == now
        llm.close.assert_awaited_once()

    def test_llm_client_closed_on_failure(self, monkeypatch):
        llm = self._fake_llm(monkeypatch)

        async def _fail(config, http_client, llm_client, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(main, "build_artifact", _fail)

        with pytest.raises(RuntimeError):
            asyncio.run(
                main._collect(
                    AppConfig(categories=_CATEGORIES),
                    Settings(),
                    "2024-05-06.html",
                    datetime(2024, 5, 6, tzinfo=timezone.utc),
                )
            )
        llm.close.assert_awaited_once()
