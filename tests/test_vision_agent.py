"""
tests/test_vision_agent.py
Gemini request shape and response parsing, with the google-genai client mocked.
"""
import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import types

from backend.agents.vision_agent import (
    VisionAgent, SECURITY_ANALYSIS_SCHEMA, ANALYSIS_FAILED_MESSAGE, build_security_prompt, split_data_url,
)
from backend.models.security_analysis import SecurityAnalysis
from backend.utils.errors import ErrorKind, SurveyError

IMAGE = "data:image/png;base64,iVBORw0KGgo="

ANALYSIS_JSON = {
    "overview": "Detached house with an open rear garden.",
    "placements": [
        {"location": "North door", "reason": "Covers entry", "cameraType": "Doorbell Camera",
         "coordinates": {"x": 50, "y": 20}},
    ],
    "cameraSummary": [{"cameraType": "Doorbell Camera", "quantity": 1}],
}


def _fake_client(text=None, side_effect=None):
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(
        return_value=SimpleNamespace(text=text), side_effect=side_effect,
    )
    return client


def test_split_data_url():
    assert split_data_url(IMAGE) == ("image/png", "iVBORw0KGgo=")
    assert split_data_url("abcd") == ("image/jpeg", "abcd")


def test_prompt_mentions_address():
    prompt = build_security_prompt("221B Baker Street, London")
    assert '"221B Baker Street, London"' in prompt
    assert "North is at the top" in prompt


def test_schema_requires_overview_and_placements():
    assert SECURITY_ANALYSIS_SCHEMA["required"] == ["overview", "placements"]
    item = SECURITY_ANALYSIS_SCHEMA["properties"]["placements"]["items"]
    assert item["required"] == ["location", "reason", "cameraType", "coordinates"]


def test_analyze_returns_parsed_analysis():
    client = _fake_client(text="  " + json.dumps(ANALYSIS_JSON) + "\n")
    agent = VisionAgent(api_key="gemini-key", client=client, model="gemini-2.5-flash")

    analysis = asyncio.run(agent.analyze_security_image("221B Baker Street, London", IMAGE))

    assert isinstance(analysis, SecurityAnalysis)
    assert analysis.to_wire() == ANALYSIS_JSON

    kwargs = client.aio.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-2.5-flash"
    prompt, image_part = kwargs["contents"]
    assert "221B Baker Street, London" in prompt
    assert isinstance(image_part, types.Part)
    assert image_part.inline_data.mime_type == "image/png"
    assert kwargs["config"].response_mime_type == "application/json"


def test_unparseable_response_is_analysis_failed():
    agent = VisionAgent(api_key="gemini-key", client=_fake_client(text="not json"))
    with pytest.raises(SurveyError) as exc_info:
        asyncio.run(agent.analyze_security_image("x", IMAGE))
    assert exc_info.value.kind == ErrorKind.ANALYSIS_FAILED
    assert exc_info.value.message == ANALYSIS_FAILED_MESSAGE


def test_missing_placements_is_analysis_failed():
    agent = VisionAgent(api_key="gemini-key", client=_fake_client(text=json.dumps({"overview": "only"})))
    with pytest.raises(SurveyError) as exc_info:
        asyncio.run(agent.analyze_security_image("x", IMAGE))
    assert exc_info.value.kind == ErrorKind.ANALYSIS_FAILED


def test_model_error_is_analysis_failed():
    client = _fake_client(side_effect=RuntimeError("503 overloaded"))
    agent = VisionAgent(api_key="gemini-key", client=client)
    with pytest.raises(SurveyError) as exc_info:
        asyncio.run(agent.analyze_security_image("x", IMAGE))
    assert exc_info.value.kind == ErrorKind.ANALYSIS_FAILED
    # No retry
    assert client.aio.models.generate_content.await_count == 1


def test_missing_key_fails_fast(monkeypatch):
    for name in ("GEMINI_API_KEY", "API_KEY"):
        monkeypatch.delenv(name, raising=False)
    client = _fake_client(text=json.dumps(ANALYSIS_JSON))
    agent = VisionAgent(client=client)
    with pytest.raises(SurveyError) as exc_info:
        asyncio.run(agent.analyze_security_image("x", IMAGE))
    assert exc_info.value.kind == ErrorKind.MISSING_CONFIGURATION
    client.aio.models.generate_content.assert_not_called()


def test_fractional_camera_quantity_is_analysis_failed():
    reply = dict(ANALYSIS_JSON, cameraSummary=[{"cameraType": "Doorbell Camera", "quantity": 1.5}])
    agent = VisionAgent(api_key="gemini-key", client=_fake_client(text=json.dumps(reply)))
    with pytest.raises(SurveyError) as exc_info:
        asyncio.run(agent.analyze_security_image("x", IMAGE))
    assert exc_info.value.kind == ErrorKind.ANALYSIS_FAILED
