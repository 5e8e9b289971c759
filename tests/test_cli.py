"""Tests for the console client: argument parsing, rendering, stdin loop."""

from __future__ import annotations

import io

import pytest
from conftest import FakeGateway
from dependency_injector import providers

from photo_search.container import create_container
from photo_search.domain.entities.photo import Photo, PipelineState
from photo_search.presentation.cli.app import build_parser, main, run, settings_from_args
from photo_search.presentation.cli.presenter import ConsolePresenter, ResultDiff
from photo_search.shared.exceptions import ErrorKind
from photo_search.shared.settings import PhotoSearchSettings

# ============================================================
# Argument parsing
# ============================================================


class TestSettingsFromArgs:
    def test_defaults_come_from_environment(self):
        args = build_parser().parse_args([])
        settings = settings_from_args(args, {"PIXABAY_API_KEY": "env-key", "PHOTO_SEARCH_PER_PAGE": "40"})
        assert settings.api_key == "env-key"
        assert settings.per_page == 40
        assert settings.safe_search is True

    def test_options_override_environment(self):
        args = build_parser().parse_args(
            ["--api-key", "cli-key", "--debounce", "0.3", "--per-page", "20", "--no-safesearch"]
        )
        settings = settings_from_args(args, {"PIXABAY_API_KEY": "env-key"})
        assert settings.api_key == "cli-key"
        assert settings.debounce_seconds == 0.3
        assert settings.per_page == 20
        assert settings.safe_search is False

    def test_blank_fallback_option_disables_fallback(self):
        args = build_parser().parse_args(["--fallback-query", ""])
        assert settings_from_args(args, {}).fallback_query is None

    def test_fallback_option(self):
        args = build_parser().parse_args(["--fallback-query", "lisbon"])
        assert settings_from_args(args, {}).fallback_query == "lisbon"


# ============================================================
# Presenter
# ============================================================


class TestResultDiff:
    def test_identity_diff(self):
        old = (Photo(1, "a"), Photo(2, "b"))
        new = (Photo(2, "b-new-url"), Photo(3, "c"))
        diff = ResultDiff.between(old, new)
        assert diff.added == (Photo(3, "c"),)
        assert diff.removed == (Photo(1, "a"),)
        assert diff.kept == 1


class TestConsolePresenter:
    def test_renders_results(self):
        out = io.StringIO()
        presenter = ConsolePresenter(out, limit=1)
        presenter.render(PipelineState(current_results=(Photo(7, "u7"), Photo(8, "u8")), query="paris"))

        lines = out.getvalue().splitlines()
        assert lines[0] == "'paris': 2 photos (+2 -0)"
        assert lines[1].split() == ["7", "u7"]
        assert lines[2] == "  ... 1 more"
        assert presenter.displayed == (Photo(7, "u7"), Photo(8, "u8"))

    def test_error_keeps_displayed_results(self):
        out = io.StringIO()
        presenter = ConsolePresenter(out)
        shown = (Photo(1, "u1"),)
        presenter.render(PipelineState(current_results=shown, query="cats"))
        presenter.render(
            PipelineState(current_results=shown, query="cats", last_error=ErrorKind.NETWORK_ERROR)
        )

        assert "! search failed (network_error)" in out.getvalue()
        assert presenter.displayed == shown
        assert presenter.renders == 2

    def test_cleared_and_no_results(self):
        out = io.StringIO()
        presenter = ConsolePresenter(out)
        presenter.render(PipelineState(query="zzqx"))
        presenter.render(PipelineState())
        assert out.getvalue().splitlines() == ["(no results)", "(cleared)"]


# ============================================================
# Console loop
# ============================================================


class TestRun:
    @pytest.mark.asyncio
    async def test_burst_of_lines_searches_last_one(self):
        container = create_container(PhotoSearchSettings(debounce_seconds=0.2))
        fake = FakeGateway({"par": [Photo(1, "u1")]})
        container.gateway.override(providers.Object(fake))
        out = io.StringIO()

        await run(container, ConsolePresenter(out), io.StringIO("p\npa\npar\n"))

        assert fake.queries == ["par"]
        assert out.getvalue().startswith("'par': 1 photos")
        assert fake.closed

    @pytest.mark.asyncio
    async def test_typing_delay_searches_each_line(self):
        container = create_container(PhotoSearchSettings(debounce_seconds=0.01))
        fake = FakeGateway({"cats": [Photo(1, "c")], "dogs": [Photo(2, "d")]})
        container.gateway.override(providers.Object(fake))
        out = io.StringIO()

        await run(container, ConsolePresenter(out), io.StringIO("cats\ndogs\n"), typing_delay=0.1)

        assert fake.queries == ["cats", "dogs"]
        assert "'dogs': 1 photos (+1 -1)" in out.getvalue()

    @pytest.mark.asyncio
    async def test_empty_input(self):
        container = create_container(PhotoSearchSettings(debounce_seconds=0.01))
        fake = FakeGateway()
        container.gateway.override(providers.Object(fake))

        await run(container, ConsolePresenter(io.StringIO()), io.StringIO(""))

        assert fake.requests == []


class TestMain:
    def test_missing_api_key_exits_with_2(self, monkeypatch):
        monkeypatch.delenv("PIXABAY_API_KEY", raising=False)
        assert main([]) == 2

    def test_invalid_per_page_exits_with_2(self, monkeypatch):
        monkeypatch.setenv("PIXABAY_API_KEY", "k")
        assert main(["--per-page", "500"]) == 2
