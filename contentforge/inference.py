"""Hugging Face Inference API client.

This module wraps the remote text-generation endpoint and normalizes the
different JSON shapes it may return into plain text.
"""

from dataclasses import dataclass
from enum import Enum
import json
import logging
from typing import Any, Dict, Optional

import requests

from contentforge.config import Settings
from contentforge.errors import ConfigurationError, InferenceError


logger = logging.getLogger(__name__)

# Sampling settings sent with every request.
SAMPLING_PARAMS = {"do_sample": True, "top_p": 0.92, "temperature": 0.85}


class ResponseShape(str, Enum):
    ARRAY_OF_GENERATED = "array_of_generated"
    OBJECT_WITH_GENERATED = "object_with_generated"
    PLAIN_STRING = "plain_string"
    UNKNOWN = "unknown"


@dataclass
class DecodedResponse:
    """Text extracted from a backend payload, tagged with the shape it had."""

    shape: ResponseShape
    text: str


def decode_response(payload: Any) -> DecodedResponse:
    """Classify a decoded JSON payload and pull the generated text out of it.

    Unrecognized shapes are never an error: the payload is serialized back to
    JSON so the caller still gets something inspectable.
    """
    if isinstance(payload, list) and payload:
        first = payload[0]
        if isinstance(first, dict) and isinstance(first.get("generated_text"), str):
            return DecodedResponse(ResponseShape.ARRAY_OF_GENERATED, first["generated_text"])
    if isinstance(payload, dict) and isinstance(payload.get("generated_text"), str):
        return DecodedResponse(ResponseShape.OBJECT_WITH_GENERATED, payload["generated_text"])
    if isinstance(payload, str):
        return DecodedResponse(ResponseShape.PLAIN_STRING, payload)
    return DecodedResponse(
        ResponseShape.UNKNOWN, json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    )


class HuggingFaceClient:
    """Sends single prompts to a hosted text-generation model."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    @property
    def model(self) -> str:
        return self.settings.model

    def _build_payload(self, prompt: str, max_new_tokens: int) -> Dict:
        return {
            "inputs": prompt,
            "parameters": {"max_new_tokens": max_new_tokens, **SAMPLING_PARAMS},
        }

    def generate(self, prompt: str, max_new_tokens: int = 512) -> str:
        """Run one generation call and return the produced text."""
        if not self.settings.api_key:
            raise ConfigurationError("Server not configured with HF_API_KEY.")

        headers = {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
        }
        try:
            resp = self.session.post(
                self.settings.endpoint,
                json=self._build_payload(prompt, max_new_tokens),
                headers=headers,
                timeout=self.settings.timeout,
            )
        except requests.RequestException as exc:
            raise InferenceError(f"HuggingFace request failed: {exc}") from exc

        if not resp.ok:
            raise InferenceError(
                f"HuggingFace error: {resp.status_code} - {resp.text}",
                status_code=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise InferenceError(
                f"HuggingFace returned invalid JSON: {exc}",
                status_code=resp.status_code,
            ) from exc

        decoded = decode_response(payload)
        if decoded.shape is ResponseShape.UNKNOWN:
            logger.debug("Unrecognized response shape from %s", self.model)
        return decoded.text
