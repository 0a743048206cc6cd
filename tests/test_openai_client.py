"""Tests for the OpenAI generation client (no network)."""

from unittest.mock import MagicMock, patch

from charmlens.integrations.openai_client import OpenAIClient, parse_generation_response


class TestParseGenerationResponse:
    """Test parsing of the model's JSON reply."""

    def test_rational_then_emotional_points(self):
        text = (
            '{"rational_points": [{"title": "Pay", "description": "Top of the market"}],'
            ' "emotional_points": [{"title": "Mission", "description": "Change hiring"}],'
            ' "summary": "Good place to work"}'
        )

        output = parse_generation_response(text)
        assert [p.title for p in output.points] == ["Pay", "Mission"]
        assert output.summary == "Good place to work"

    def test_code_fences_are_stripped(self):
        text = '```json\n{"rational_points": [{"title": "Pay", "description": ""}]}\n```'
        output = parse_generation_response(text)
        assert output.points[0].title == "Pay"
        assert output.summary is None

    def test_blank_and_malformed_points_are_skipped(self):
        text = '{"rational_points": [{"title": "", "description": ""}, "oops", {"title": "Kept"}]}'
        output = parse_generation_response(text)
        assert [p.title for p in output.points] == ["Kept"]

    def test_invalid_json(self):
        assert parse_generation_response("Sorry, I can't help with that") is None

    def test_non_object_json(self):
        assert parse_generation_response("[1, 2, 3]") is None


class TestOpenAIClient:
    """Test OpenAIClient.generate_points()."""

    def test_without_api_key_returns_none(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        client = OpenAIClient()
        assert client.client is None
        assert client.generate_points("We build robots") is None

    def test_empty_fact_returns_none(self):
        client = OpenAIClient(api_key="test-key")
        assert client.generate_points("   ") is None

    def test_generate_points(self):
        client = OpenAIClient(api_key="test-key")
        response = MagicMock()
        response.choices[0].message.content = '{"rational_points": [{"title": "Pay", "description": "High"}]}'

        with patch.object(client.client.chat.completions, "create", return_value=response) as create:
            output = client.generate_points("We pay well")

        assert output.points[0].title == "Pay"
        create.assert_called_once()

    def test_api_failure_returns_none(self):
        client = OpenAIClient(api_key="test-key")
        with patch.object(client.client.chat.completions, "create", side_effect=RuntimeError("boom")):
            assert client.generate_points("We pay well") is None
