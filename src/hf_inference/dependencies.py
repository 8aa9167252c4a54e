"""Service singleton for callers that don't manage their own HuggingFaceService."""

from hf_inference.services.inference_service import HuggingFaceService
from hf_inference.utils.config import load_config

_huggingface_service: HuggingFaceService | None = None


def get_huggingface_service() -> HuggingFaceService:
    """Get or create the shared HuggingFaceService instance.

    Raises:
        EmptyTokenError: If HUGGINGFACE_API_KEY is not configured
    """
    global _huggingface_service
    if _huggingface_service is None:
        _huggingface_service = HuggingFaceService.from_config(load_config())
    return _huggingface_service


def reset_huggingface_service() -> None:
    """Close and drop the shared instance (configuration changes, tests)."""
    global _huggingface_service
    if _huggingface_service is not None:
        _huggingface_service.close()
        _huggingface_service = None
