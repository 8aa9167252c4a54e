"""Model resolution: decide whether a model returns text or images, and where to send it."""

import logging
from typing import Callable, Mapping, Optional

from hf_inference.models.inference import ModelEntry, ModelType
from hf_inference.services.errors import ModelMetadataLookupError
from hf_inference.services.transport import InferenceTransport
from hf_inference.utils.config import DEFAULT_METADATA_URL
from hf_inference.utils.retry import NetworkError

logger = logging.getLogger(__name__)


class ModelMetadataClient:
    """Reads a model's pipeline tag from the Hugging Face Hub API."""

    def __init__(self, transport: InferenceTransport, metadata_url: str = DEFAULT_METADATA_URL):
        self.transport = transport
        self.metadata_url = metadata_url

    def get_pipeline_tag(self, model: str) -> str:
        """Fetch the Hub "pipeline_tag" for a model.

        Args:
            model: Model identifier, e.g. "facebook/bart-large-cnn"

        Returns:
            Pipeline tag such as "summarization"

        Raises:
            ModelMetadataLookupError: On network failure, non-success status,
                a non-object body, or a missing tag
        """
        url = f"{self.metadata_url}{model}"
        try:
            response = self.transport.get(url)
        except NetworkError as e:
            raise ModelMetadataLookupError(str(e)) from e

        if not response.is_success:
            raise ModelMetadataLookupError(
                f"Metadata lookup for {model} returned status {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ModelMetadataLookupError(f"Metadata for {model} is not JSON") from e

        if not isinstance(data, dict):
            raise ModelMetadataLookupError(f"Metadata for {model} is not an object")

        tag = data.get("pipeline_tag")
        if not tag or not isinstance(tag, str):
            raise ModelMetadataLookupError(f"Metadata for {model} has no pipeline_tag")
        return tag


class ModelResolver:
    """Resolves a model identifier to a ModelEntry.

    Resolution order:
      1. Known-model table (entry returned unchanged)
      2. Caller-supplied ``options["type"]`` (url = identifier)
      3. Hub pipeline tag mapped through the task table
      4. ``text`` with url = identifier
    """

    def __init__(
        self,
        models: Mapping[str, ModelEntry],
        task_types: Mapping[str, ModelType],
        metadata_lookup: Optional[Callable[[str], str]] = None,
    ):
        """Initialize the resolver.

        Args:
            models: Known models keyed by identifier
            task_types: Hub pipeline tag -> ModelType
            metadata_lookup: Callable returning a model's pipeline tag; may raise.
                When None, step 3 is skipped.
        """
        self.models = models
        self.task_types = task_types
        self.metadata_lookup = metadata_lookup

    def is_known(self, model: str) -> bool:
        """Check if a model is in the known-model table."""
        return model in self.models

    def resolve(self, model: str, options: Optional[Mapping] = None) -> ModelEntry:
        """Resolve a model identifier. Never raises.

        Args:
            model: Model identifier
            options: Call options; only "type" is consulted

        Returns:
            ModelEntry whose type is always a ModelType member
        """
        entry = self.models.get(model)
        if entry is not None:
            return entry

        override = (options or {}).get("type")
        if override is not None:
            try:
                return ModelEntry(type=ModelType(override), url=model)
            except ValueError:
                logger.warning(f"Ignoring unknown model type '{override}' for {model}")

        return ModelEntry(type=self._lookup_type(model), url=model)

    def _lookup_type(self, model: str) -> ModelType:
        if self.metadata_lookup is None:
            return ModelType.TEXT

        try:
            tag = self.metadata_lookup(model)
        except Exception as e:
            # Best effort only
            logger.debug(f"Metadata lookup failed for {model}: {e}")
            return ModelType.TEXT

        model_type = self.task_types.get(tag)
        if model_type is None:
            logger.debug(f"No model type mapped for pipeline tag '{tag}' ({model})")
            return ModelType.TEXT
        return ModelType(model_type)
