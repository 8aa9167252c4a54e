"""Response normalization: map model-specific response bodies onto two result shapes.

Image models return raw bytes, which become a PNG data URI. Text models return
one of several JSON shapes depending on the task (chat completion, generation,
question answering, translation, summarization); the first human-readable
string found is pulled out and returned together with the parsed body.
"""

import base64
import json
from typing import Any, Optional

import httpx

from hf_inference.models.inference import ModelType, TextResult
from hf_inference.services.errors import NormalizationError

IMAGE_DATA_URI_PREFIX = "data:image/png;base64,"

# Checked in order on a response object (or the first element of a list)
TEXT_FIELDS = ("generated_text", "answer", "translation_text", "summary_text")


def image_data_uri(body: bytes) -> str:
    """Encode a raw body as a PNG data URI. An empty body gives an empty payload."""
    return IMAGE_DATA_URI_PREFIX + base64.b64encode(body).decode("ascii")


def _non_empty_string(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def _chat_content(data: Any) -> Optional[str]:
    """choices[0].message.content"""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    return _non_empty_string(message.get("content"))


def _field_text(item: Any) -> str:
    """First known text field of an object, else the object serialized as JSON."""
    if isinstance(item, dict):
        for field in TEXT_FIELDS:
            text = _non_empty_string(item.get(field))
            if text is not None:
                return text
    return json.dumps(item)


def extract_text(data: Any) -> str:
    """Pull the human-readable text out of a parsed (truthy) JSON body.

    Precedence:
        1. chat completion: choices[0].message.content
        2. list body: known fields of data[0], else data[0] as JSON
        3. object body: known fields of data, else data as JSON
        4. a bare string is returned unchanged; other scalars as JSON
    """
    text = _chat_content(data)
    if text is not None:
        return text

    if isinstance(data, list):
        return _field_text(data[0])

    if isinstance(data, dict):
        return _field_text(data)

    if isinstance(data, str):
        return data

    return json.dumps(data)


def normalize_text(body: bytes, encoding_text: Optional[str] = None) -> TextResult:
    """Normalize a text-model response body.

    Args:
        body: Raw response bytes
        encoding_text: Body decoded by the HTTP layer, used when the body is
            not usable JSON. Decoded as UTF-8 (with replacement) if omitted.

    Returns:
        TextResult with the extracted text and the parsed body
    """
    try:
        data = json.loads(body) if body else None
    except ValueError:
        data = None

    if not data:
        if encoding_text is None:
            encoding_text = body.decode("utf-8", errors="replace")
        return TextResult(text=encoding_text, raw=data)

    return TextResult(text=extract_text(data), raw=data)


def normalize(response: httpx.Response, model_type: ModelType) -> str | TextResult:
    """Normalize a successful inference response.

    Args:
        response: HTTP response from the inference API
        model_type: Resolved model type

    Returns:
        PNG data URI for image models, TextResult for text models

    Raises:
        NormalizationError: If anything goes wrong while reading the response
    """
    try:
        body = response.content
        if model_type == ModelType.IMAGE:
            return image_data_uri(body)
        if model_type == ModelType.TEXT:
            return normalize_text(body, response.text)
    except Exception as e:
        raise NormalizationError(f"Failed to normalize {model_type} response: {e}") from e

    raise NormalizationError(f"Unsupported model type: {model_type}")
