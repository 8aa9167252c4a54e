"""Models for Hugging Face inference calls (model entries, results, failures)."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class ModelType(str, Enum):
    """Output shape of a model, drives response normalization."""

    TEXT = "text"
    IMAGE = "image"


class PayloadStyle(str, Enum):
    """Request body shapes understood by the payload builder."""

    INPUTS = "inputs"  # {"inputs": prompt, ...parameters}
    CHAT = "chat"      # OpenAI-style chat completion messages


class ErrorKind(str, Enum):
    """Failure categories reported by HuggingFaceService.get_result()."""

    EMPTY_PROMPT = "empty_prompt"
    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    SERVICE_UNAVAILABLE = "service_unavailable"
    REQUEST_FAILED = "request_failed"
    NETWORK = "network"
    NORMALIZATION = "normalization"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class ModelEntry:
    """A resolved model: its output type and request path under the base URL."""

    type: ModelType
    url: str
    payload: PayloadStyle = PayloadStyle.INPUTS

    @classmethod
    def from_dict(cls, model: str, data: dict) -> "ModelEntry":
        """Create an entry from a configuration mapping.

        Args:
            model: Model identifier the entry is registered under
            data: Mapping with "type", optional "url" and optional "payload"

        Returns:
            ModelEntry (url defaults to the model identifier)

        Raises:
            ValueError: If type or payload is not a recognized value
        """
        return cls(
            type=ModelType(data["type"]),
            url=data.get("url") or model,
            payload=PayloadStyle(data.get("payload", PayloadStyle.INPUTS.value)),
        )


@dataclass(frozen=True)
class TextResult:
    """Normalized text response: extracted text plus the parsed body."""

    text: Optional[str]
    raw: Any = None

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {"text": self.text, "raw": self.raw}


# Image results are data URIs, text results are TextResult
NormalizedResult = Union[str, TextResult, None]


@dataclass(frozen=True)
class InferenceFailure:
    """Why a call produced no result."""

    kind: ErrorKind
    message: str
    status_code: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "status_code": self.status_code,
        }


@dataclass(frozen=True)
class InferenceOutcome:
    """Result of a call together with the failure that replaced it, if any."""

    value: NormalizedResult = None
    error: Optional[InferenceFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None
