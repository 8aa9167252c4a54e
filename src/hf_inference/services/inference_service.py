"""Hugging Face Inference API service - text and image models behind one call."""

import traceback
from types import MappingProxyType
from typing import Mapping, Optional

import httpx

from hf_inference.models.inference import (
    ErrorKind,
    InferenceFailure,
    InferenceOutcome,
    ModelEntry,
    NormalizedResult,
)
from hf_inference.services.errors import (
    APIRequestError,
    AuthenticationError,
    EmptyPromptError,
    EmptyTokenError,
    NormalizationError,
    RateLimitError,
    ServiceUnavailableError,
    classify_http_error,
)
from hf_inference.services.model_resolver import ModelMetadataClient, ModelResolver
from hf_inference.services.payload_builder import build_payload
from hf_inference.services.response_normalizer import normalize
from hf_inference.services.transport import InferenceTransport
from hf_inference.utils.config import (
    DEFAULT_BASE_URL,
    DEFAULT_METADATA_URL,
    DEFAULT_MODEL_TYPES,
    DEFAULT_MODELS,
    DEFAULT_RETRIES,
    DEFAULT_RETRY_DELAY,
    DEFAULT_TIMEOUT,
    build_model_table,
    build_task_type_map,
)
from hf_inference.utils.logging import get_logger, request_context
from hf_inference.utils.retry import NetworkError

logger = get_logger(__name__)

# Most specific first
_ERROR_KINDS: tuple[tuple[type[BaseException], ErrorKind], ...] = (
    (EmptyPromptError, ErrorKind.EMPTY_PROMPT),
    (AuthenticationError, ErrorKind.AUTHENTICATION),
    (RateLimitError, ErrorKind.RATE_LIMIT),
    (ServiceUnavailableError, ErrorKind.SERVICE_UNAVAILABLE),
    (APIRequestError, ErrorKind.REQUEST_FAILED),
    (NetworkError, ErrorKind.NETWORK),
    (NormalizationError, ErrorKind.NORMALIZATION),
)


class HuggingFaceService:
    """Client for Hugging Face hosted inference models.

    A call resolves the model's type (text or image), builds the request body,
    POSTs it with retry, and normalizes the answer into either a PNG data URI
    or a TextResult. Per-call failures never propagate: ``get_response``
    returns None and ``get_result`` reports the failure, and both log it.
    Model tables are fixed at construction, so one instance can be shared
    between threads.
    """

    def __init__(
        self,
        api_token: str,
        base_url: str = DEFAULT_BASE_URL,
        models: Optional[Mapping[str, dict | ModelEntry]] = None,
        model_types: Optional[Mapping[str, str]] = None,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        metadata_url: str = DEFAULT_METADATA_URL,
        metadata_lookup_enabled: bool = True,
        http_client: Optional[httpx.Client] = None,
    ):
        """Initialize the service.

        Args:
            api_token: Hugging Face API token (required)
            base_url: Inference API base URL, model paths are appended to it
            models: Known models {identifier: {"type", "url", "payload"}};
                defaults to DEFAULT_MODELS
            model_types: Hub pipeline tag -> "text" | "image"; defaults to
                DEFAULT_MODEL_TYPES
            timeout: Request timeout in seconds
            retries: Retries after the first attempt
            retry_delay: Seconds between attempts
            metadata_url: Hub model metadata base URL
            metadata_lookup_enabled: Ask the Hub for the pipeline tag of
                unknown models
            http_client: Optional httpx.Client to send requests with

        Raises:
            EmptyTokenError: If the API token is blank
            ValueError: If a model or task mapping is malformed
        """
        if not api_token or not api_token.strip():
            raise EmptyTokenError()

        self.base_url = base_url
        self.models = MappingProxyType(
            build_model_table(dict(DEFAULT_MODELS if models is None else models))
        )
        self.model_types = MappingProxyType(
            build_task_type_map(dict(DEFAULT_MODEL_TYPES if model_types is None else model_types))
        )
        self.transport = InferenceTransport(
            api_token,
            timeout=timeout,
            retries=retries,
            retry_delay=retry_delay,
            client=http_client,
        )

        metadata_lookup = None
        if metadata_lookup_enabled:
            metadata_lookup = ModelMetadataClient(self.transport, metadata_url).get_pipeline_tag

        self.resolver = ModelResolver(self.models, self.model_types, metadata_lookup)

    @classmethod
    def from_config(
        cls, config: dict, http_client: Optional[httpx.Client] = None
    ) -> "HuggingFaceService":
        """Create a service from a load_config() dictionary."""
        return cls(
            api_token=config.get("api_token", ""),
            base_url=config.get("base_url", DEFAULT_BASE_URL),
            models=config.get("models"),
            model_types=config.get("model_types"),
            timeout=config.get("timeout", DEFAULT_TIMEOUT),
            retries=config.get("retries", DEFAULT_RETRIES),
            retry_delay=config.get("retry_delay", DEFAULT_RETRY_DELAY),
            metadata_url=config.get("metadata_url", DEFAULT_METADATA_URL),
            metadata_lookup_enabled=config.get("metadata_lookup_enabled", True),
            http_client=http_client,
        )

    def is_model_supported(self, model: str) -> bool:
        """Check if a model is in the known-model table."""
        return self.resolver.is_known(model)

    def get_response(
        self, prompt: str, model: str, options: Optional[Mapping] = None
    ) -> NormalizedResult:
        """Get a response from a Hugging Face model.

        Args:
            prompt: Input prompt (must not be blank)
            model: Model identifier
            options: Optional call options:
                - type: "text" or "image", used for models not in the table
                - parameters: dict merged into the request body
                - previous_messages: prior chat turns (chat models)
                - max_tokens: completion limit (chat models, default 500)

        Returns:
            PNG data URI for image models, TextResult for text models, or None
            if the call failed for any reason (see logs or use get_result())
        """
        return self.get_result(prompt, model, options).value

    def get_result(
        self, prompt: str, model: str, options: Optional[Mapping] = None
    ) -> InferenceOutcome:
        """Like get_response(), but also reports why a call failed.

        Returns:
            InferenceOutcome with the normalized value, or with value None and
            an InferenceFailure describing the error
        """
        with request_context(model=model):
            try:
                return InferenceOutcome(value=self._call(prompt, model, options or {}))
            except Exception as e:
                self._log_exception(e)
                return InferenceOutcome(error=self._failure_from(e))

    def _call(self, prompt: str, model: str, options: Mapping) -> NormalizedResult:
        self._validate_prompt(prompt)

        entry = self.resolver.resolve(model, options)
        payload = build_payload(prompt, options, entry, model)
        url = f"{self.base_url}{entry.url}"

        logger.info(
            "huggingface_request",
            model=model,
            model_type=entry.type.value,
            payload_style=entry.payload.value,
            url=url,
        )

        response = self.transport.post(url, payload)
        if not response.is_success:
            self._handle_error(response)

        return normalize(response, entry.type)

    @staticmethod
    def _validate_prompt(prompt: str) -> None:
        if not prompt or not prompt.strip():
            raise EmptyPromptError()

    def _handle_error(self, response: httpx.Response) -> None:
        """Log a failed API response and raise the matching APIRequestError."""
        status_code = response.status_code
        error = _error_message(response)

        request_url = None
        request_method = None
        try:
            request_url = str(response.request.url)
            request_method = response.request.method
        except RuntimeError:
            # Response built without a request
            pass

        logger.error(
            "huggingface_api_error",
            status_code=status_code,
            error=error,
            response_body=response.text,
            request_url=request_url,
            request_method=request_method,
        )

        raise classify_http_error(status_code, error, response.text)

    @staticmethod
    def _log_exception(e: Exception) -> None:
        frames = traceback.extract_tb(e.__traceback__)
        last = frames[-1] if frames else None
        logger.error(
            "huggingface_service_error",
            exception_kind=type(e).__name__,
            message=str(e),
            file=last.filename if last else None,
            line=last.lineno if last else None,
            trace="".join(traceback.format_exception(type(e), e, e.__traceback__)),
        )

    @staticmethod
    def _failure_from(e: Exception) -> InferenceFailure:
        kind = next(
            (kind for error_type, kind in _ERROR_KINDS if isinstance(e, error_type)),
            ErrorKind.UNEXPECTED,
        )
        return InferenceFailure(
            kind=kind,
            message=str(e),
            status_code=getattr(e, "status_code", None),
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.transport.close()

    def __enter__(self) -> "HuggingFaceService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _error_message(response: httpx.Response) -> str:
    """The "error" field of a JSON error body, else "Unknown error"."""
    try:
        data = response.json()
    except ValueError:
        return "Unknown error"
    if isinstance(data, dict) and data.get("error"):
        error = data["error"]
        return error if isinstance(error, str) else str(error)
    return "Unknown error"
