"""Tests for the assistant client.

The OpenAI SDK is never called for real; the client's underlying
`chat.completions.create` is replaced with a MagicMock.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from nexushub.integrations.openai_client import (
    CHAT_EMPTY_FALLBACK,
    CHAT_ERROR_FALLBACK,
    TIP_ERROR_FALLBACK,
    AssistantClient,
)
from nexushub.models.link import Category


def _completion(content):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


@pytest.fixture
def offline_client(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    return AssistantClient()


@pytest.fixture
def online_client():
    with patch("nexushub.integrations.openai_client.OpenAI") as mock_openai:
        client = AssistantClient(api_key="test-key")
        yield client, mock_openai.return_value.chat.completions.create


class TestWithoutApiKey:
    """Every call falls back when no key is configured."""

    def test_chat(self, offline_client):
        assert offline_client.client is None
        assert offline_client.chat("hello", "Links: ") == CHAT_ERROR_FALLBACK

    def test_analyze_link(self, offline_client):
        analysis = offline_client.analyze_link("https://example.com", "Example")
        assert analysis.suggested_title == "Example"
        assert analysis.category == Category.OTHER.value
        assert analysis.tags == ["uncategorized"]

    def test_analyze_link_without_title_uses_url(self, offline_client):
        assert offline_client.analyze_link("https://example.com").suggested_title == "https://example.com"

    def test_parse_event(self, offline_client):
        assert offline_client.parse_event("dentist tomorrow") is None

    def test_tip(self, offline_client):
        assert offline_client.productivity_tip() == TIP_ERROR_FALLBACK


class TestChat:
    """Test AssistantClient.chat()."""

    def test_context_goes_into_system_prompt(self, online_client):
        client, create = online_client
        create.return_value = _completion("You have one link.")

        reply = client.chat("What do I have?", "Links: Python Docs")

        assert reply == "You have one link."
        messages = create.call_args.kwargs["messages"]
        assert messages[0]["role"] == "system"
        assert "Links: Python Docs" in messages[0]["content"]
        assert messages[1] == {"role": "user", "content": "What do I have?"}

    def test_empty_reply(self, online_client):
        client, create = online_client
        create.return_value = _completion("")
        assert client.chat("hi", "") == CHAT_EMPTY_FALLBACK

    def test_api_failure(self, online_client):
        client, create = online_client
        create.side_effect = RuntimeError("boom")
        assert client.chat("hi", "") == CHAT_ERROR_FALLBACK


class TestAnalyzeLink:
    """Test AssistantClient.analyze_link()."""

    def test_parses_json_response(self, online_client):
        client, create = online_client
        create.return_value = _completion(
            '{"suggestedTitle": "Python 3 Docs", "category": "Education", "tags": ["python", "reference"]}'
        )

        analysis = client.analyze_link("https://docs.python.org/3/")

        assert analysis.suggested_title == "Python 3 Docs"
        assert analysis.category == "Education"
        assert analysis.tags == ["python", "reference"]
        assert create.call_args.kwargs["response_format"] == {"type": "json_object"}

    def test_code_fences_are_stripped(self, online_client):
        client, create = online_client
        create.return_value = _completion('```json\n{"suggestedTitle": "X", "category": "Work", "tags": []}\n```')
        assert client.analyze_link("https://x.example").category == "Work"

    def test_unknown_category_maps_to_other(self, online_client):
        client, create = online_client
        create.return_value = _completion('{"suggestedTitle": "X", "category": "Gardening", "tags": []}')
        assert client.analyze_link("https://x.example").category == Category.OTHER.value

    def test_tags_are_capped_at_four(self, online_client):
        client, create = online_client
        create.return_value = _completion(
            '{"suggestedTitle": "X", "category": "Work", "tags": ["a", "b", "c", "d", "e", "f"]}'
        )
        assert client.analyze_link("https://x.example").tags == ["a", "b", "c", "d"]

    def test_invalid_json_falls_back(self, online_client):
        client, create = online_client
        create.return_value = _completion("not json at all")

        analysis = client.analyze_link("https://x.example", "Hint")

        assert analysis.suggested_title == "Hint"
        assert analysis.tags == ["uncategorized"]


class TestParseEvent:
    """Test AssistantClient.parse_event()."""

    def test_parses_event(self, online_client):
        client, create = online_client
        create.return_value = _completion(
            '{"title": "Dentist", "date": "2030-03-01T15:00:00Z", "type": "Reminder"}'
        )

        parsed = client.parse_event("dentist friday 3pm", now=datetime(2030, 2, 25, tzinfo=timezone.utc))

        assert parsed.title == "Dentist"
        assert parsed.type == "Reminder"
        assert "2030-02-25" in create.call_args.kwargs["messages"][1]["content"]

    def test_non_iso_date_is_rejected(self, online_client):
        client, create = online_client
        create.return_value = _completion('{"title": "Dentist", "date": "friday", "type": "Reminder"}')
        assert client.parse_event("dentist friday") is None

    def test_blank_text_skips_the_api(self, online_client):
        client, create = online_client
        assert client.parse_event("   ") is None
        create.assert_not_called()


class TestProductivityTip:
    def test_returns_tip(self, online_client):
        client, create = online_client
        create.return_value = _completion("Close unused tabs.")
        assert client.productivity_tip() == "Close unused tabs."

    def test_failure_falls_back(self, online_client):
        client, create = online_client
        create.side_effect = RuntimeError("boom")
        assert client.productivity_tip() == TIP_ERROR_FALLBACK
