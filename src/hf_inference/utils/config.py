"""Configuration loading and validation for hf_inference."""

import json
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from hf_inference.models.inference import ModelEntry, ModelType, PayloadStyle

logger = logging.getLogger(__name__)

# Get the project root directory (parent of src)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent

# Load environment variables from .env file in project root
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_BASE_URL = "https://api-inference.huggingface.co/models/"
DEFAULT_METADATA_URL = "https://huggingface.co/api/models/"
DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRIES = 2
DEFAULT_RETRY_DELAY = 1.0

# Pre-configured models. Any other model can still be called by identifier.
DEFAULT_MODELS: dict[str, dict] = {
    "CompVis/stable-diffusion-v1-4": {
        "type": ModelType.IMAGE.value,
        "url": "CompVis/stable-diffusion-v1-4",
    },
    "meta-llama/Meta-Llama-3-8B-Instruct": {
        "type": ModelType.TEXT.value,
        "url": "meta-llama/Meta-Llama-3-8B-Instruct/v1/chat/completions",
        "payload": PayloadStyle.CHAT.value,
    },
}

# Hub pipeline tag -> model type, used for models missing from the table
DEFAULT_MODEL_TYPES: dict[str, str] = {
    "text-generation": ModelType.TEXT.value,
    "text2text-generation": ModelType.TEXT.value,
    "question-answering": ModelType.TEXT.value,
    "summarization": ModelType.TEXT.value,
    "translation": ModelType.TEXT.value,
    "text-classification": ModelType.TEXT.value,
    "image-classification": ModelType.TEXT.value,
    "image-segmentation": ModelType.TEXT.value,
    "image-to-text": ModelType.TEXT.value,
    "text-to-image": ModelType.IMAGE.value,
    "image-to-image": ModelType.IMAGE.value,
    "visual-question-answering": ModelType.TEXT.value,
}


def _load_models_file(path: str | None) -> dict[str, dict]:
    """Read extra model entries from a JSON file ({model_id: {type, url, payload}})."""
    if not path:
        return {}
    models_path = Path(path)
    if not models_path.is_absolute():
        models_path = PROJECT_ROOT / models_path
    try:
        data = json.loads(models_path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Failed to load models file {models_path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Models file {models_path} must contain a JSON object")
        return {}
    return data


def load_config() -> dict:
    """Load configuration from environment variables."""
    models = dict(DEFAULT_MODELS)
    models.update(_load_models_file(os.getenv("HUGGINGFACE_MODELS_FILE")))

    config = {
        # Required API token
        "api_token": os.getenv("HUGGINGFACE_API_KEY", ""),
        # Endpoints
        "base_url": os.getenv("HUGGINGFACE_BASE_URL") or DEFAULT_BASE_URL,
        "metadata_url": os.getenv("HUGGINGFACE_METADATA_URL") or DEFAULT_METADATA_URL,
        # Transport
        "timeout": float(os.getenv("HUGGINGFACE_TIMEOUT", str(DEFAULT_TIMEOUT))),
        "retries": int(os.getenv("HUGGINGFACE_RETRIES", str(DEFAULT_RETRIES))),
        "retry_delay": float(os.getenv("HUGGINGFACE_RETRY_DELAY", str(DEFAULT_RETRY_DELAY))),
        # Model resolution
        "metadata_lookup_enabled": os.getenv("HUGGINGFACE_METADATA_LOOKUP", "true").lower()
        == "true",
        "models": models,
        "model_types": dict(DEFAULT_MODEL_TYPES),
        # Logging
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "json_logs": os.getenv("JSON_LOGS", "false").lower() == "true",
    }

    return config


def validate_config(config: dict) -> list[str]:
    """Validate configuration and return list of errors."""
    errors = []

    if not str(config.get("api_token") or "").strip():
        errors.append("HUGGINGFACE_API_KEY is required")

    if config.get("timeout", DEFAULT_TIMEOUT) <= 0:
        errors.append("HUGGINGFACE_TIMEOUT must be greater than 0")

    if config.get("retries", DEFAULT_RETRIES) < 0:
        errors.append("HUGGINGFACE_RETRIES cannot be negative")

    if config.get("retry_delay", DEFAULT_RETRY_DELAY) < 0:
        errors.append("HUGGINGFACE_RETRY_DELAY cannot be negative")

    for model, entry in (config.get("models") or {}).items():
        try:
            ModelEntry.from_dict(model, entry)
        except (KeyError, TypeError, ValueError, AttributeError):
            errors.append(f"Invalid model configuration for: {model}")

    for task, model_type in (config.get("model_types") or {}).items():
        if model_type not in {t.value for t in ModelType}:
            errors.append(f"Invalid model type '{model_type}' for task: {task}")

    return errors


def build_model_table(models: dict[str, dict]) -> dict[str, ModelEntry]:
    """Convert raw model configuration into ModelEntry objects.

    Args:
        models: Mapping of model identifier to {"type", "url", "payload"}

    Returns:
        Mapping of model identifier to ModelEntry

    Raises:
        ValueError: If an entry is malformed
    """
    table = {}
    for model, entry in models.items():
        if isinstance(entry, ModelEntry):
            table[model] = entry
            continue
        try:
            table[model] = ModelEntry.from_dict(model, entry)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ValueError(f"Invalid model configuration for: {model}") from e
    return table


def build_task_type_map(model_types: dict[str, str]) -> dict[str, ModelType]:
    """Convert raw pipeline tag mapping into ModelType values."""
    return {task: ModelType(model_type) for task, model_type in model_types.items()}
