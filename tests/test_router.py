"""Tests for ilr_proxy.routing.router — prefix routing with referer fallback."""

import asyncio

import pytest

from ilr_proxy.routing.origin import OriginLabel
from ilr_proxy.routing.router import Router
from ilr_proxy.routing.rules import (
    LATEST_BIASED,
    LEGACY_BIASED,
    SINGLE_ORIGIN,
    PathRule,
    RuleTable,
)

LATEST = OriginLabel.LATEST
LEGACY = OriginLabel.LEGACY


@pytest.fixture
def latest_biased() -> Router:
    return Router(LATEST_BIASED)


@pytest.fixture
def legacy_biased() -> Router:
    return Router(LEGACY_BIASED)


class TestLatestBiased:
    def test_home_page(self, latest_biased: Router) -> None:
        assert latest_biased.resolve("/", "") is LATEST

    def test_home_page_with_query_marker(self, latest_biased: Router) -> None:
        assert latest_biased.resolve("/?utm_source=mail", "") is LATEST

    @pytest.mark.parametrize("referer", ["", "/random-page", "/news", "/sites/all/x"])
    def test_home_page_ignores_referer(self, latest_biased: Router, referer: str) -> None:
        assert latest_biased.resolve("/", referer) is LATEST

    def test_bare_slash_prefix_is_not_home(self, latest_biased: Router) -> None:
        assert latest_biased.resolve("//news", "") is LEGACY

    def test_primary_prefix(self, latest_biased: Router) -> None:
        assert latest_biased.resolve("/news/today", "") is LATEST

    def test_no_match_uses_default(self, latest_biased: Router) -> None:
        assert latest_biased.resolve("/random-page", "") is LEGACY

    def test_shared_path_follows_referer(self, latest_biased: Router) -> None:
        assert latest_biased.resolve("/views/ajax", "/news/today") is LATEST

    def test_shared_path_unmatched_referer_falls_through(self, latest_biased: Router) -> None:
        assert latest_biased.resolve("/views/ajax", "/random-page") is LEGACY

    def test_shared_path_without_referer(self, latest_biased: Router) -> None:
        assert latest_biased.resolve("/views/ajax", "") is LEGACY

    def test_shared_path_suffix(self, latest_biased: Router) -> None:
        assert latest_biased.resolve("/views/ajax?_wrapper_format=drupal_ajax", "/alumni") is LATEST

    def test_home_referer_does_not_count(self, latest_biased: Router) -> None:
        """The home-page rule applies to the request path only."""
        assert latest_biased.resolve("/views/ajax", "/") is LEGACY

    def test_prefix_is_case_sensitive(self, latest_biased: Router) -> None:
        assert latest_biased.resolve("/News/today", "") is LEGACY

    def test_prefix_without_slash_matches_siblings(self, latest_biased: Router) -> None:
        """``/news`` has no trailing slash, so ``/newsletter`` matches too."""
        assert latest_biased.resolve("/newsletter", "") is LATEST

    def test_files_d8_on_latest(self, latest_biased: Router) -> None:
        assert latest_biased.resolve("/sites/default/files-d8/a.png", "") is LATEST

    def test_legacy_files_fall_to_default(self, latest_biased: Router) -> None:
        assert latest_biased.resolve("/sites/default/files/a.png", "") is LEGACY


class TestLegacyBiased:
    def test_primary_prefix(self, legacy_biased: Router) -> None:
        assert legacy_biased.resolve("/faculty-reporting", "") is LEGACY

    def test_default(self, legacy_biased: Router) -> None:
        assert legacy_biased.resolve("/anything-else", "") is LATEST

    def test_no_home_page_rule(self, legacy_biased: Router) -> None:
        assert legacy_biased.resolve("/", "/faculty-reporting") is LATEST

    def test_trailing_slash_boundary(self, legacy_biased: Router) -> None:
        assert legacy_biased.resolve("/sites/default/files/report.pdf", "") is LEGACY
        assert legacy_biased.resolve("/sites/default/files-d8/report.pdf", "") is LATEST
        assert legacy_biased.resolve("/sites/default/files", "") is LATEST

    def test_shared_path_follows_referer(self, legacy_biased: Router) -> None:
        assert legacy_biased.resolve("/views/ajax", "/ilr-press/books") is LEGACY
        assert legacy_biased.resolve("/views/ajax", "/news") is LATEST


class TestSingleOrigin:
    @pytest.mark.parametrize("path", ["/", "/news", "/views/ajax", "/faculty-reporting"])
    def test_everything_to_default(self, path: str) -> None:
        assert Router(SINGLE_ORIGIN).resolve(path, "/news") is LEGACY


class TestPrimaryOverride:
    @pytest.mark.parametrize("referer", ["", "/random-page", "/faculty-reporting", "garbage"])
    def test_primary_match_is_referer_independent(self, referer: str) -> None:
        router = Router(LATEST_BIASED)
        for rule in LATEST_BIASED.rules:
            assert router.resolve(rule.prefix + "/x", referer) is rule.label

    def test_primary_beats_shared(self) -> None:
        table = RuleTable(
            name="overlap",
            default=LEGACY,
            rules=(PathRule("/views", LATEST),),
            shared_paths=("/views/ajax",),
        )
        assert Router(table).resolve("/views/ajax", "") is LATEST


class TestFirstMatchWins:
    def test_overlapping_prefixes_use_declared_order(self) -> None:
        table = RuleTable(
            name="overlap",
            default=LATEST,
            rules=(PathRule("/news", LEGACY), PathRule("/news/today", LATEST)),
        )
        assert Router(table).resolve("/news/today", "") is LEGACY

    def test_reversed_order_flips_result(self) -> None:
        table = RuleTable(
            name="overlap",
            default=LEGACY,
            rules=(PathRule("/news/today", LATEST), PathRule("/news", LEGACY)),
        )
        assert Router(table).resolve("/news/today", "") is LATEST

    def test_referer_scan_uses_declared_order(self) -> None:
        table = RuleTable(
            name="overlap",
            default=LATEST,
            rules=(PathRule("/a", LEGACY), PathRule("/a/b", LATEST)),
            shared_paths=("/ajax",),
        )
        assert Router(table).resolve("/ajax", "/a/b") is LEGACY


class TestPurity:
    def test_repeated_calls_agree(self, latest_biased: Router) -> None:
        inputs = [("/", ""), ("/news", ""), ("/views/ajax", "/news"), ("/x", "/y")]
        first = [latest_biased.resolve(p, r) for p, r in inputs]
        for _ in range(50):
            assert [latest_biased.resolve(p, r) for p, r in inputs] == first

    @pytest.mark.anyio
    async def test_concurrent_calls_agree(self, latest_biased: Router) -> None:
        async def resolve(path: str, referer: str) -> OriginLabel:
            await asyncio.sleep(0)
            return latest_biased.resolve(path, referer)

        results = await asyncio.gather(
            *(resolve("/views/ajax", "/news/today") for _ in range(100))
        )
        assert set(results) == {LATEST}

    def test_total_over_odd_inputs(self, latest_biased: Router) -> None:
        for path, referer in [("", ""), ("news", ""), ("/\x00", "\xff"), ("?", "/news")]:
            assert latest_biased.resolve(path, referer) in (LATEST, LEGACY)
