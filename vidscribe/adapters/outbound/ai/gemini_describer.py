"""Adapter wrapping Google Gemini for the VideoDescriberPort.

Uses the google-genai SDK to send the sampled frames, in order, as inline
JPEG parts and asks for a JSON description with a fixed schema.
"""
from __future__ import annotations

import asyncio
import base64
import binascii
import json
import logging
import re
from typing import Any, Sequence

from vidscribe.core.entities.video_description import VideoDescription
from vidscribe.core.exceptions import DescriptionParseError, DescriptionServiceError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?\s*```$", re.DOTALL | re.IGNORECASE)

DESCRIPTION_PROMPT = (
    "Analyze these frames extracted sequentially from a video. Provide a detailed, "
    "comprehensive description of what is happening in the video. Describe the setting, "
    "any people or objects, their actions, and the overall narrative or sequence of events.\n\n"
    "Respond with a JSON object with these fields:\n"
    '    "summary": string (a concise overview of the whole video),\n'
    '    "setting": string (where and when the video appears to take place),\n'
    '    "keyElements": array of strings (important people, objects and features),\n'
    '    "sequenceOfEvents": array of strings (what happens, in chronological order)\n\n'
    "Only respond with valid JSON, no additional text."
)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding Markdown code fence (```json ... ```) if present."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def parse_description(text: str) -> VideoDescription:
    """Parse the model reply into a :class:`VideoDescription`."""
    if not text or not text.strip():
        raise DescriptionParseError("The AI model returned an empty description.")
    try:
        data = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as exc:
        raise DescriptionParseError() from exc
    if not isinstance(data, dict):
        raise DescriptionParseError()
    try:
        return VideoDescription.from_dict(data)
    except (TypeError, ValueError) as exc:
        logger.warning("Malformed description reply: %s", exc)
        raise DescriptionParseError() from exc


class GeminiVideoDescriber:
    """Implements VideoDescriberPort by calling the Gemini API."""

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.4,
    ) -> None:
        if not api_key:
            raise ValueError(
                "GEMINI_API_KEY is required for the Gemini describer. "
                "Get one at https://aistudio.google.com/apikey"
            )
        self._model = model
        self._temperature = temperature

        from google import genai

        self._client = genai.Client(api_key=api_key)

        logger.info("GeminiVideoDescriber initialised (model=%s)", self._model)

    @property
    def model(self) -> str:
        return self._model

    # ------------------------------------------------------------------
    # VideoDescriberPort interface
    # ------------------------------------------------------------------

    async def describe(self, frames: Sequence[str]) -> VideoDescription:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._describe_sync, list(frames))

    def test_connection(self) -> bool:
        try:
            from google.genai import types
            self._client.models.generate_content(
                model=self._model,
                contents="ping",
                config=types.GenerateContentConfig(max_output_tokens=5),
            )
            logger.info("Gemini connection successful")
            return True
        except Exception as exc:
            logger.error("Gemini connection failed: %s", exc)
            return False

    # ------------------------------------------------------------------
    # Internal / synchronous helpers
    # ------------------------------------------------------------------

    def _describe_sync(self, frames: list[str]) -> VideoDescription:
        from google.genai import types

        contents: list[Any] = [DESCRIPTION_PROMPT, *self._image_parts(frames)]
        logger.info("Requesting description for %d frames from %s", len(frames), self._model)
        try:
            response = self._client.models.generate_content(
                model=self._model,
                contents=contents,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=self._response_schema(),
                    temperature=self._temperature,
                ),
            )
        except Exception as exc:
            logger.error("Error calling Gemini API: %s", exc)
            raise DescriptionServiceError() from exc

        raw_text = response.text or ""
        description = parse_description(raw_text)
        logger.info(
            "Received description (%d key elements, %d events)",
            len(description.key_elements), len(description.sequence_of_events),
        )
        return description

    @staticmethod
    def _image_parts(frames: list[str]) -> list[Any]:
        from google.genai import types

        parts = []
        for idx, payload in enumerate(frames):
            try:
                data = base64.b64decode(payload, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise DescriptionServiceError(f"Frame {idx} is not valid base64 image data.") from exc
            parts.append(types.Part.from_bytes(data=data, mime_type="image/jpeg"))
        return parts

    @staticmethod
    def _response_schema() -> Any:
        from google.genai import types

        string_list = types.Schema(type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING))
        return types.Schema(
            type=types.Type.OBJECT,
            properties={
                "summary": types.Schema(type=types.Type.STRING),
                "setting": types.Schema(type=types.Type.STRING),
                "keyElements": string_list,
                "sequenceOfEvents": string_list,
            },
            required=["summary", "setting", "keyElements", "sequenceOfEvents"],
        )
