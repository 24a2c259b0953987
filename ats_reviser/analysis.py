"""
Gemini analysis client.

One POST to ``generateContent`` per analysis, JSON mode with a fixed response
schema. No retries: a failed call is reported to the user as-is.
"""

import json
import logging
import re
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from .config import Settings, load_settings
from .errors import AnalysisRequestFailed, IncompleteUserInput, MalformedModelResponse, MissingCredential
from .models import AnalysisResult
from .prompts import REQUIRED_RESPONSE_FIELDS, RESPONSE_SCHEMA, build_revision_prompt

logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def build_payload(resume_text: str, job_description: str, temperature: float) -> Dict[str, Any]:
    prompt = build_revision_prompt(resume_text, job_description)
    return {
        "contents": [
            {"parts": [{"text": prompt}]}
        ],
        "generationConfig": {
            "temperature": temperature,
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
        },
    }


def extract_candidate_text(api_response: Dict[str, Any]) -> str:
    """Pulls the first candidate's text out of a generateContent response."""
    try:
        parts = api_response["candidates"][0]["content"]["parts"]
        text = "".join(part.get("text", "") for part in parts)
    except (KeyError, IndexError, TypeError, AttributeError) as e:
        raise MalformedModelResponse() from e
    if not text.strip():
        raise MalformedModelResponse()
    return text.strip()


def parse_analysis(llm_output_text: str) -> AnalysisResult:
    """
    Parses the model's JSON output into an AnalysisResult.

    Markdown code fences are tolerated. Invalid JSON, a missing top-level field
    or a resume that does not validate raise MalformedModelResponse.
    """
    text = llm_output_text.strip()
    # Clean up potential markdown code block fences
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]

    json_match = _JSON_OBJECT_RE.search(text)
    if json_match:
        text = json_match.group(0)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"❌ Model response is not valid JSON: {e}")
        raise MalformedModelResponse() from e

    if not isinstance(data, dict):
        raise MalformedModelResponse()
    missing = [name for name in REQUIRED_RESPONSE_FIELDS if name not in data or data[name] in (None, "")]
    if missing:
        logger.error(f"❌ Model response is missing required fields: {missing}")
        raise MalformedModelResponse("AI response is missing required fields.")

    try:
        result = AnalysisResult.model_validate(data)
    except ValidationError as e:
        logger.error(f"❌ Model response failed validation: {e.error_count()} errors")
        logger.debug(f"Validation errors: {e}")
        raise MalformedModelResponse() from e

    if result.revised_score < result.original_score:
        logger.warning(
            f"⚠️  Revised score ({result.revised_score}) is below the original ({result.original_score})"
        )
    return result


class AnalysisClient:
    """Sends resume text and a job description to Gemini for revision."""

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._settings = settings
        self._transport = transport

    @property
    def settings(self) -> Settings:
        # read lazily so a key exported after startup is still picked up
        return self._settings or load_settings()

    async def analyze(self, resume_text: str, job_description: str) -> AnalysisResult:
        if not resume_text.strip() or not job_description.strip():
            raise IncompleteUserInput()

        settings = self.settings
        if not settings.api_key:
            logger.error("❌ GEMINI_API_KEY environment variable is not set")
            raise MissingCredential()

        payload = build_payload(resume_text, job_description, settings.temperature)
        logger.info(f"🔗 Calling Gemini API (model={settings.model})...")
        logger.debug(f"Payload size: {len(json.dumps(payload))} bytes")

        async with httpx.AsyncClient(timeout=settings.timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    settings.generate_url,
                    params={"key": settings.api_key},
                    headers={"Content-Type": "application/json"},
                    json=payload,
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                logger.error(f"❌ HTTP Error: {e.response.status_code}")
                logger.debug(f"Response: {e.response.text}")
                raise AnalysisRequestFailed() from e
            except httpx.RequestError as e:
                logger.error(f"❌ Request Error: {e}")
                raise AnalysisRequestFailed() from e

        logger.info(f"✅ Gemini API response received successfully (Status: {response.status_code})")
        try:
            api_response = response.json()
        except ValueError as e:
            raise MalformedModelResponse() from e
        logger.debug(f"Response preview: {str(api_response)[:500]}...")

        result = parse_analysis(extract_candidate_text(api_response))
        logger.info(f"📊 Scores: original={result.original_score}, revised={result.revised_score}")
        return result
