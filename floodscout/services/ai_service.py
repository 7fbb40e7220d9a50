import base64
import json
import logging
import os

from openai import APIError, AsyncOpenAI
from pydantic import ValidationError as SchemaError

from floodscout.config import Settings
from floodscout.schemas.analysis import REQUIRED_FIELDS, AnalysisResult
from floodscout.utils.exceptions import UpstreamError
from floodscout.utils.response import mask_secrets

logger = logging.getLogger(__name__)

PROMPT_PATH = os.path.join(
    os.path.dirname(os.path.dirname(__file__)),
    "prompts",
    "flood_assessment.txt",
)


def load_prompt() -> str:
    with open(PROMPT_PATH) as f:
        return f.read()


def _build_api_kwargs(model: str, content: list[dict]) -> dict:
    """Build OpenAI API kwargs based on model type."""
    api_kwargs: dict = {
        "model": model,
        "messages": [{"role": "user", "content": content}],
        "response_format": {"type": "json_object"},
    }

    if model.startswith("o"):
        # o-series reasoning models (o1, o3, o4-mini, etc.)
        # - no temperature support
        # - use max_completion_tokens instead of max_tokens
        api_kwargs["max_completion_tokens"] = 8192
    else:
        # gpt-series models (gpt-4o-mini, gpt-4o, gpt-4.1, etc.)
        api_kwargs["max_tokens"] = 4096
        api_kwargs["temperature"] = 0.1

    return api_kwargs


def _strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        lines = [l for l in lines if not l.strip().startswith("```")]
        text = "\n".join(lines)
    return text


def extract_json_object(text: str) -> dict:
    """Pull the analysis object out of the model's reply.

    Tries each '{' in order and keeps the first one that decodes to a JSON
    object, so stray braces in surrounding prose are skipped. Falls back to
    parsing the whole (fence-stripped) text.
    """
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            obj, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            obj = None
        if isinstance(obj, dict):
            return obj
        start = text.find("{", start + 1)

    try:
        obj = json.loads(_strip_code_fences(text))
    except json.JSONDecodeError as e:
        logger.error("Failed to parse AI response: %s", text[:500])
        raise UpstreamError("Invalid AI response format") from e
    if not isinstance(obj, dict):
        raise UpstreamError("Invalid AI response format")
    return obj


def parse_analysis(text: str) -> AnalysisResult:
    data = extract_json_object(text)

    missing = [field for field in REQUIRED_FIELDS if data.get(field) in (None, "")]
    if missing:
        logger.error("Missing required fields in analysis: %s", ", ".join(missing))
        raise UpstreamError("Incomplete analysis data")

    try:
        return AnalysisResult.model_validate(data)
    except SchemaError as e:
        logger.error("AI response does not match the analysis schema: %s", e)
        raise UpstreamError("Invalid AI response format") from e


class OpenAIVisionAssessor:
    """One chat completion per image, no retries.

    `client` is an AsyncOpenAI instance, or None when no API key is set.
    """

    def __init__(self, client: AsyncOpenAI | None, model: str, prompt: str | None = None):
        self.client = client
        self.model = model
        self.prompt = prompt if prompt is not None else load_prompt()

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIVisionAssessor":
        client = None
        if settings.openai_api_key:
            kwargs: dict = {
                "api_key": settings.openai_api_key,
                "timeout": settings.openai_timeout_seconds,
                "max_retries": 0,
            }
            if settings.openai_base_url:
                kwargs["base_url"] = settings.openai_base_url
            client = AsyncOpenAI(**kwargs)
        return cls(client, settings.openai_model)

    def _require_client(self) -> AsyncOpenAI:
        if self.client is None:
            logger.error("OPENAI_API_KEY not configured, cannot call the AI service")
            raise UpstreamError("AI service not configured")
        return self.client

    async def assess(self, image_bytes: bytes, mime_type: str) -> AnalysisResult:
        client = self._require_client()

        b64 = base64.b64encode(image_bytes).decode("utf-8")
        content: list[dict] = [
            {"type": "text", "text": self.prompt},
            {
                "type": "image_url",
                "image_url": {
                    "url": f"data:{mime_type};base64,{b64}",
                    "detail": "high",
                },
            },
        ]
        api_kwargs = _build_api_kwargs(self.model, content)
        logger.info("Calling OpenAI model=%s with %d image bytes (%s)", self.model, len(image_bytes), mime_type)

        try:
            response = await client.chat.completions.create(**api_kwargs)
        except APIError as e:
            logger.exception("OpenAI request failed: %s", mask_secrets(str(e)))
            raise UpstreamError("Failed to reach AI service") from e

        raw_text = ""
        if response.choices:
            raw_text = response.choices[0].message.content or ""
        logger.info("OpenAI raw response (%d chars): %s", len(raw_text), raw_text[:500])

        if not raw_text.strip():
            raise UpstreamError("No text in AI response")

        return parse_analysis(raw_text)

    async def list_models(self) -> list[str]:
        client = self._require_client()
        try:
            return sorted([model.id async for model in client.models.list()])
        except APIError as e:
            logger.exception("OpenAI model listing failed: %s", mask_secrets(str(e)))
            raise UpstreamError("Failed to reach AI service") from e
