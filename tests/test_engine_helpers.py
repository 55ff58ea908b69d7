"""Tests for password strength, search and assistant context helpers."""

from datetime import datetime, timezone

import pytest

from nexushub.engine.context import build_assistant_context, parse_event_date, upcoming_events
from nexushub.engine.search import SearchResultType, global_search
from nexushub.engine.strength import PASSWORD_ALPHABET, check_strength, generate_password
from nexushub.models.event import CalendarEvent
from nexushub.models.password import PasswordStrength


class TestCheckStrength:
    """Test password strength rating."""

    @pytest.mark.parametrize("password", ["", "abc", "Ab1!xyz"])
    def test_short_passwords_are_weak(self, password):
        assert check_strength(password) == PasswordStrength.WEAK

    @pytest.mark.parametrize("password", ["abcdefgh", "Abcdefgh1!x"])
    def test_eight_to_eleven_characters_are_medium(self, password):
        assert check_strength(password) == PasswordStrength.MEDIUM

    def test_long_mixed_password_is_strong(self):
        assert check_strength("Correct-Horse-9") == PasswordStrength.STRONG

    def test_long_password_missing_a_class_is_medium(self):
        assert check_strength("correct-horse-battery") == PasswordStrength.MEDIUM
        assert check_strength("CorrectHorse99") == PasswordStrength.MEDIUM


class TestGeneratePassword:
    """Test password generation."""

    def test_default_length(self):
        assert len(generate_password()) == 16

    def test_uses_alphabet_only(self):
        password = generate_password(64)
        assert set(password) <= set(PASSWORD_ALPHABET)

    def test_rejects_non_positive_length(self):
        with pytest.raises(ValueError):
            generate_password(0)


class TestGlobalSearch:
    """Test search across collections."""

    def test_matches_are_grouped_by_type(self, sample_link, sample_password, sample_event):
        link = sample_link.model_copy(update={"id": "l1", "title": "GitHub docs"})
        entry = sample_password.model_copy(update={"id": "p1"})
        event = sample_event.model_copy(update={"id": "e1", "title": "GitHub review"})

        results = global_search("github", [link], [entry], [event])

        assert [r.type for r in results] == [
            SearchResultType.LINK.value,
            SearchResultType.PASSWORD.value,
            SearchResultType.EVENT.value,
        ]
        assert results[1].detail == "octocat"
        assert "hunter2" not in results[1].model_dump_json()

    def test_links_match_on_tags(self, sample_link):
        link = sample_link.model_copy(update={"id": "l1"})
        assert [r.id for r in global_search("DOCS", [link], [], [])] == ["l1"]

    def test_blank_query_returns_nothing(self, sample_link):
        assert global_search("   ", [sample_link], [], []) == []


class TestAssistantContext:
    """Test the summary passed to the assistant."""

    def test_lists_sites_but_not_credentials(self, sample_link, sample_password, sample_event):
        context = build_assistant_context([sample_link], [sample_password], [sample_event])

        assert "Python Docs (https://docs.python.org/3/) - Tags: python,docs" in context
        assert "Passwords Stored For: github.com" in context
        assert "Team sync on 2030-01-15T10:00:00+00:00" in context
        assert "hunter2" not in context
        assert "octocat" not in context

    def test_completed_events_are_left_out(self, sample_event):
        done = sample_event.model_copy(update={"completed": True})
        context = build_assistant_context([], [], [done])
        assert context.endswith("Upcoming Events: ")


class TestUpcomingEvents:
    """Test the dashboard's upcoming events selection."""

    def _event(self, title, date, completed=False):
        return CalendarEvent(user_id="user-123", title=title, date=date, completed=completed)

    def test_future_incomplete_events_soonest_first(self):
        now = datetime(2030, 1, 1, tzinfo=timezone.utc)
        events = [
            self._event("later", "2030-03-01T09:00:00Z"),
            self._event("past", "2029-12-31T09:00:00Z"),
            self._event("soon", "2030-01-02T09:00:00Z"),
            self._event("done", "2030-01-03T09:00:00Z", completed=True),
            self._event("garbled", "next tuesday"),
        ]

        assert [e.title for e in upcoming_events(events, now=now)] == ["soon", "later"]

    def test_limit(self):
        now = datetime(2030, 1, 1, tzinfo=timezone.utc)
        events = [self._event(f"e{day}", f"2030-01-{day:02d}T09:00:00") for day in range(2, 10)]
        assert len(upcoming_events(events, now=now)) == 3

    def test_naive_dates_are_treated_as_utc(self):
        parsed = parse_event_date("2030-01-02T09:00:00")
        assert parsed.tzinfo is not None
        assert parse_event_date("not a date") is None
