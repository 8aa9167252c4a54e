"""Client for Hugging Face hosted text and image models.

Usage:
    from hf_inference import HuggingFaceService

    service = HuggingFaceService(api_token="hf_...")
    result = service.get_response("Hello!", "meta-llama/Meta-Llama-3-8B-Instruct")
    print(result.text)

    image = service.get_response("a red fox", "CompVis/stable-diffusion-v1-4")
    # "data:image/png;base64,..."

    # or use the shared instance configured from the environment:
    from hf_inference import get_response
    get_response("Summarize this...", "facebook/bart-large-cnn")
"""

from typing import Mapping, Optional

from hf_inference.dependencies import get_huggingface_service, reset_huggingface_service
from hf_inference.models import (
    ErrorKind,
    InferenceFailure,
    InferenceOutcome,
    ModelEntry,
    ModelType,
    NormalizedResult,
    PayloadStyle,
    TextResult,
)
from hf_inference.services import (
    EmptyPromptError,
    EmptyTokenError,
    HuggingFaceService,
    HuggingFaceServiceError,
)

__version__ = "0.1.0"

__all__ = [
    "HuggingFaceService",
    "get_response",
    "is_model_supported",
    "get_huggingface_service",
    "reset_huggingface_service",
    "ModelType",
    "PayloadStyle",
    "ModelEntry",
    "TextResult",
    "NormalizedResult",
    "ErrorKind",
    "InferenceFailure",
    "InferenceOutcome",
    "HuggingFaceServiceError",
    "EmptyTokenError",
    "EmptyPromptError",
    "__version__",
]


def get_response(
    prompt: str, model: str, options: Optional[Mapping] = None
) -> NormalizedResult:
    """Call a model through the shared, environment-configured service."""
    return get_huggingface_service().get_response(prompt, model, options)


def is_model_supported(model: str) -> bool:
    """Check the shared service's known-model table."""
    return get_huggingface_service().is_model_supported(model)
