# Inference services for hf_inference
from .errors import (
    APIRequestError,
    AuthenticationError,
    EmptyPromptError,
    EmptyTokenError,
    HuggingFaceServiceError,
    ModelMetadataLookupError,
    NormalizationError,
    RateLimitError,
    ServiceUnavailableError,
)
from .inference_service import HuggingFaceService
from .model_resolver import ModelMetadataClient, ModelResolver
from .payload_builder import build_payload
from .response_normalizer import normalize
from .transport import InferenceTransport

__all__ = [
    "HuggingFaceService",
    "ModelResolver",
    "ModelMetadataClient",
    "InferenceTransport",
    "build_payload",
    "normalize",
    # Errors
    "HuggingFaceServiceError",
    "EmptyTokenError",
    "EmptyPromptError",
    "APIRequestError",
    "AuthenticationError",
    "RateLimitError",
    "ServiceUnavailableError",
    "NormalizationError",
    "ModelMetadataLookupError",
]
