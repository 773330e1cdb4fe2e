"""Google Gemini API wrapper with timeout, retry and response validation."""

import asyncio
import json
import logging

from google import genai
from google.genai import types
from pydantic import ValidationError

from config import settings
from errors import ExternalServiceError
from models.schemas.narrative import NarrativeAnalysis
from services import prompt_builder

logger = logging.getLogger(__name__)

_client: genai.Client | None = None


def get_client() -> genai.Client | None:
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - Gemini features disabled")
        return None
    if _client is None:
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


def clean_json_response(text: str) -> str:
    """Strip code fences and anything around the outermost JSON object."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    start, end = text.find("{"), text.rfind("}")
    if start < 0 or end < start:
        raise ValueError("no JSON object in response")
    return text[start:end + 1]


async def generate_json(prompt: str) -> dict:
    """Send a prompt to Gemini and parse the JSON response.

    Each attempt is bounded by ``settings.llm_timeout_seconds``; failed
    attempts are retried ``settings.llm_max_retries`` times before giving up
    with ``ExternalServiceError``.
    """
    client = get_client()
    if client is None:
        raise ExternalServiceError("Gemini API key is not configured")

    attempts = settings.llm_max_retries + 1
    last_error: Exception | None = None
    for attempt in range(1, attempts + 1):
        try:
            response = await asyncio.wait_for(
                client.aio.models.generate_content(
                    model=settings.gemini_model,
                    contents=prompt,
                    config=types.GenerateContentConfig(
                        temperature=0.3,
                        max_output_tokens=4096,
                    ),
                ),
                timeout=settings.llm_timeout_seconds,
            )
            return json.loads(clean_json_response(response.text or ""))
        except asyncio.TimeoutError as e:
            logger.warning("Gemini call timed out (attempt %d/%d)", attempt, attempts)
            last_error = e
        except ValueError as e:
            logger.error("Failed to parse Gemini response as JSON: %s", e)
            last_error = e
        except Exception as e:
            logger.error("Gemini API error: %s", e)
            last_error = e

    raise ExternalServiceError(
        "Narrative analysis unavailable",
        details={"attempts": attempts, "reason": str(last_error)},
    ) from last_error


async def generate_narrative(
    resume_text: str,
    job_description: str,
    local_matched: list[str] | None = None,
    local_missing: list[str] | None = None,
) -> NarrativeAnalysis:
    """Ask Gemini for the fixed-shape narrative analysis of a résumé."""
    prompt = prompt_builder.build_narrative_prompt(
        resume_text, job_description, local_matched=local_matched, local_missing=local_missing
    )
    data = await generate_json(prompt)
    try:
        return NarrativeAnalysis.model_validate(data)
    except ValidationError as e:
        logger.error("Gemini response does not match the narrative shape: %s", e)
        raise ExternalServiceError("Invalid narrative analysis response") from e
