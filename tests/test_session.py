"""Unit tests for core/session.py: filter state and the model override policy."""

import pytest

from core.session import FilterState, SearchSession
from models import FilterAction, RecencyWindow


class TestDomainFilter:
    """Test suite for SearchSession.domain_filter."""

    def test_strips_scheme_and_path(self, session):
        cleaned = session.domain_filter("https://wikipedia.org/Foo", FilterAction.ALLOW)

        assert cleaned == "wikipedia.org"
        assert session.filters.allowed_domains == ["wikipedia.org"]
        assert session.filters.blocked_domains == []

    def test_strips_http_scheme_and_whitespace(self, session):
        assert session.domain_filter("  http://example.com/a/b ", "block") == "example.com"
        assert session.filters.blocked_domains == ["example.com"]

    def test_block_then_allow_leaves_domain_only_in_allowed(self, session):
        session.domain_filter("example.com", FilterAction.BLOCK)
        session.domain_filter("example.com", FilterAction.ALLOW)

        assert session.filters.allowed_domains == ["example.com"]
        assert session.filters.blocked_domains == []

    def test_allow_then_block_moves_domain(self, session):
        session.domain_filter("example.com", FilterAction.ALLOW)
        session.domain_filter("example.com", FilterAction.BLOCK)

        assert session.filters.allowed_domains == []
        assert session.filters.blocked_domains == ["example.com"]

    def test_duplicate_is_not_appended_twice(self, session):
        session.domain_filter("example.com", FilterAction.ALLOW)
        session.domain_filter("https://example.com", FilterAction.ALLOW)

        assert session.filters.allowed_domains == ["example.com"]

    def test_no_bound_at_insertion(self, session):
        for i in range(5):
            session.domain_filter(f"site{i}.org", FilterAction.ALLOW)

        assert len(session.filters.allowed_domains) == 5

    def test_empty_after_cleaning_is_rejected(self, session):
        with pytest.raises(ValueError):
            session.domain_filter("https://", FilterAction.ALLOW)
        assert session.filters.allowed_domains == []


class TestCombinedDomainFilter:
    """Test suite for FilterState.combined_domain_filter."""

    def test_allowed_take_priority(self):
        state = FilterState(
            allowed_domains=["a.com", "b.com", "c.com"],
            blocked_domains=["x.com", "y.com"],
        )
        assert state.combined_domain_filter() == ["a.com", "b.com", "c.com"]

    def test_blocked_fill_remaining_slots_with_prefix(self):
        state = FilterState(
            allowed_domains=["a.com"],
            blocked_domains=["v.com", "w.com", "x.com", "y.com", "z.com"],
        )
        assert state.combined_domain_filter() == ["a.com", "-v.com", "-w.com"]

    def test_only_blocked(self):
        state = FilterState(blocked_domains=["x.com"])
        assert state.combined_domain_filter() == ["-x.com"]

    def test_empty(self):
        assert FilterState().combined_domain_filter() == []


class TestRecencyAndClear:
    """Test suite for recency_filter, clear_filters and list_filters."""

    def test_set_and_disable_recency(self, session):
        assert session.recency_filter("week") is RecencyWindow.WEEK
        assert session.filters.recency_filter is RecencyWindow.WEEK

        assert session.recency_filter("none") is None
        assert session.filters.recency_filter is None

    def test_clear_filters_resets_everything(self, session):
        session.domain_filter("a.com", FilterAction.ALLOW)
        session.domain_filter("b.com", FilterAction.BLOCK)
        session.recency_filter("day")

        session.clear_filters()

        assert session.filters.allowed_domains == []
        assert session.filters.blocked_domains == []
        assert session.filters.recency_filter is None

    def test_list_filters_empty(self, session):
        text = session.list_filters()

        assert text.startswith("Current filters:")
        assert "No allowed domains configured." in text
        assert "No blocked domains configured." in text
        assert "No recency filter configured." in text
        assert "up to 3 domains total" in text

    def test_list_filters_reports_state(self, session):
        session.domain_filter("https://wikipedia.org/Foo", FilterAction.ALLOW)
        session.domain_filter("spam.com", FilterAction.BLOCK)
        session.recency_filter("month")

        text = session.list_filters()

        assert "Allowed domains: wikipedia.org" in text
        assert "Blocked domains: spam.com" in text
        assert "Recency filter: month (limiting to content from the last 30 days)" in text

    def test_list_filters_does_not_mutate(self, session):
        session.domain_filter("a.com", FilterAction.ALLOW)
        session.list_filters()

        assert session.filters.allowed_domains == ["a.com"]


class TestResolveModel:
    """Test suite for the auto-selection and override policy."""

    def test_auto_mode_adopts_recommendation(self, session):
        resolution = session.resolve_model("quick question")

        assert resolution.model == "sonar"
        assert not resolution.overridden
        assert session.selection.current_model == "sonar"

    def test_auto_mode_falls_back_to_default(self, session):
        session.resolve_model("quick question")
        resolution = session.resolve_model("weather in Paris")

        assert resolution.model == "sonar-pro"
        assert session.selection.current_model == "sonar-pro"

    def test_pinned_model_kept_for_weak_match(self, session):
        session.pin_model("sonar")

        assert session.resolve_model("weather in Paris").model == "sonar"
        # a single keyword is not enough to override
        assert session.resolve_model("please evaluate").model == "sonar"

    def test_strong_match_overrides_for_one_call(self, session):
        session.pin_model("sonar")

        resolution = session.resolve_model("think and evaluate the options")

        assert resolution.model == "sonar-reasoning"
        assert resolution.overridden
        assert resolution.description.endswith("(auto-selected based on query intent)")
        assert session.selection.current_model == "sonar"
        assert session.selection.auto_selection_enabled is False

        assert session.resolve_model("weather in Paris").model == "sonar"

    def test_strong_match_for_pinned_model_is_not_an_override(self, session):
        session.pin_model("sonar")

        resolution = session.resolve_model("quick and simple")

        assert resolution.model == "sonar"
        assert not resolution.overridden

    def test_reset_model_reenables_auto(self, session):
        session.pin_model("sonar-deep-research")
        session.reset_model()

        assert session.selection.current_model == "sonar-pro"
        assert session.selection.auto_selection_enabled is True

    def test_pin_unknown_model_rejected(self, session):
        with pytest.raises(ValueError):
            session.pin_model("gpt-4")

    def test_invalid_default_model_rejected(self):
        with pytest.raises(ValueError, match="Invalid default model"):
            SearchSession(default_model="sonar-ultra")
