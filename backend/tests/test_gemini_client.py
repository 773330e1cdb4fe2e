"""Gemini wrapper tests against an in-process fake client."""

import asyncio
import json
from types import SimpleNamespace

import pytest

from config import settings
from errors import ExternalServiceError
from services import gemini_client
from services.prompt_builder import build_narrative_prompt

NARRATIVE = {
    "match_score": 72,
    "missing_keywords": ["kubernetes"],
    "strong_matches": ["python"],
    "key_findings": ["Solid backend background."],
    "suggested_improvements": ["Quantify impact."],
    "skills": {"technical": ["python"], "soft": [], "missing": ["kubernetes"], "recommendations": []},
    "experience": {"strengths": ["APIs"], "gaps": [], "recommendations": []},
}


class FakeModels:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = 0

    async def generate_content(self, model, contents, config):
        self.calls += 1
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if item == "slow":
            await asyncio.sleep(1)
        return SimpleNamespace(text=item)


@pytest.fixture
def fake(monkeypatch):
    def install(*responses):
        models = FakeModels(responses)
        client = SimpleNamespace(aio=SimpleNamespace(models=models))
        monkeypatch.setattr(gemini_client, "get_client", lambda: client)
        return models
    monkeypatch.setattr(settings, "llm_max_retries", 1)
    return install


class TestCleanJsonResponse:
    def test_plain(self):
        assert gemini_client.clean_json_response('{"a": 1}') == '{"a": 1}'

    def test_code_fence(self):
        assert gemini_client.clean_json_response('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_surrounding_prose(self):
        assert gemini_client.clean_json_response('Here you go: {"a": {"b": 2}} Thanks!') == '{"a": {"b": 2}}'

    def test_no_object(self):
        with pytest.raises(ValueError):
            gemini_client.clean_json_response("no json here")


@pytest.mark.asyncio
async def test_no_api_key_fails_without_calling():
    with pytest.raises(ExternalServiceError):
        await gemini_client.generate_json("prompt")


@pytest.mark.asyncio
async def test_generate_json(fake):
    models = fake("```json\n" + json.dumps(NARRATIVE) + "\n```")
    data = await gemini_client.generate_json("prompt")
    assert data["match_score"] == 72
    assert models.calls == 1


@pytest.mark.asyncio
async def test_retries_then_succeeds(fake):
    models = fake(RuntimeError("boom"), json.dumps(NARRATIVE))
    data = await gemini_client.generate_json("prompt")
    assert data["strong_matches"] == ["python"]
    assert models.calls == 2


@pytest.mark.asyncio
async def test_gives_up_after_retries(fake):
    models = fake("not json", "still not json")
    with pytest.raises(ExternalServiceError) as exc_info:
        await gemini_client.generate_json("prompt")
    assert models.calls == 2
    assert exc_info.value.details["attempts"] == 2


@pytest.mark.asyncio
async def test_timeout(fake, monkeypatch):
    monkeypatch.setattr(settings, "llm_timeout_seconds", 0.01)
    monkeypatch.setattr(settings, "llm_max_retries", 0)
    fake("slow")
    with pytest.raises(ExternalServiceError):
        await gemini_client.generate_json("prompt")


@pytest.mark.asyncio
async def test_generate_narrative(fake):
    fake(json.dumps(NARRATIVE))
    narrative = await gemini_client.generate_narrative("resume", "job")
    assert narrative.match_score == 72
    assert narrative.skills.missing == ["kubernetes"]


@pytest.mark.asyncio
async def test_generate_narrative_rejects_invalid_shape(fake):
    fake(json.dumps({**NARRATIVE, "match_score": 150}))
    with pytest.raises(ExternalServiceError):
        await gemini_client.generate_narrative("resume", "job")


def test_prompt_includes_local_keywords():
    prompt = build_narrative_prompt("resume", "job", local_matched=["python"], local_missing=["go"])
    assert "Keywords already matched: python" in prompt
    assert "Keywords detected as missing: go" in prompt
    assert "match_score" in prompt
