"""Unit tests for model resolution and the Hub metadata client."""

import httpx
import pytest

from hf_inference.models.inference import ModelEntry, ModelType, PayloadStyle
from hf_inference.services.errors import ModelMetadataLookupError
from hf_inference.services.model_resolver import ModelMetadataClient, ModelResolver
from hf_inference.services.transport import InferenceTransport
from hf_inference.utils.config import (
    DEFAULT_MODEL_TYPES,
    DEFAULT_MODELS,
    build_model_table,
    build_task_type_map,
)

METADATA_URL = "https://huggingface.co/api/models/"


@pytest.fixture
def models():
    return build_model_table(DEFAULT_MODELS)


@pytest.fixture
def task_types():
    return build_task_type_map(DEFAULT_MODEL_TYPES)


def _failing_lookup(model: str) -> str:
    raise ModelMetadataLookupError(f"no metadata for {model}")


@pytest.mark.unit
class TestModelResolver:
    def test_known_models_return_table_entry(self, models, task_types):
        resolver = ModelResolver(models, task_types, _failing_lookup)

        for model, entry in models.items():
            assert resolver.resolve(model, {}) is entry

    def test_known_model_ignores_type_override(self, models, task_types):
        resolver = ModelResolver(models, task_types)

        entry = resolver.resolve("CompVis/stable-diffusion-v1-4", {"type": "text"})

        assert entry.type == ModelType.IMAGE

    def test_known_model_url_can_differ_from_identifier(self, models, task_types):
        resolver = ModelResolver(models, task_types)

        entry = resolver.resolve("meta-llama/Meta-Llama-3-8B-Instruct")

        assert entry.url == "meta-llama/Meta-Llama-3-8B-Instruct/v1/chat/completions"
        assert entry.payload == PayloadStyle.CHAT

    @pytest.mark.parametrize("model_type", ["text", "image"])
    def test_type_override_for_unknown_model(self, models, task_types, model_type):
        calls = []
        resolver = ModelResolver(models, task_types, calls.append)

        entry = resolver.resolve("someone/custom-model", {"type": model_type})

        assert entry == ModelEntry(type=ModelType(model_type), url="someone/custom-model")
        assert calls == []

    def test_unknown_override_falls_through_to_lookup(self, models, task_types):
        resolver = ModelResolver(models, task_types, lambda model: "text-to-image")

        entry = resolver.resolve("someone/custom-model", {"type": "audio"})

        assert entry == ModelEntry(type=ModelType.IMAGE, url="someone/custom-model")

    @pytest.mark.parametrize(
        "tag,expected",
        [
            ("text-to-image", ModelType.IMAGE),
            ("image-to-image", ModelType.IMAGE),
            ("summarization", ModelType.TEXT),
            ("image-to-text", ModelType.TEXT),
        ],
    )
    def test_pipeline_tag_mapping(self, models, task_types, tag, expected):
        resolver = ModelResolver(models, task_types, lambda model: tag)

        entry = resolver.resolve("someone/custom-model")

        assert entry == ModelEntry(type=expected, url="someone/custom-model")

    def test_lookup_failure_defaults_to_text(self, models, task_types):
        resolver = ModelResolver(models, task_types, _failing_lookup)

        entry = resolver.resolve("someone/custom-model", {})

        assert entry == ModelEntry(type=ModelType.TEXT, url="someone/custom-model")

    def test_any_lookup_exception_is_absorbed(self, models, task_types):
        def broken(model):
            raise RuntimeError("boom")

        resolver = ModelResolver(models, task_types, broken)

        assert resolver.resolve("someone/custom-model").type == ModelType.TEXT

    def test_unknown_pipeline_tag_defaults_to_text(self, models, task_types):
        resolver = ModelResolver(models, task_types, lambda model: "reinforcement-learning")

        assert resolver.resolve("someone/custom-model").type == ModelType.TEXT

    def test_without_lookup_defaults_to_text(self, models, task_types):
        resolver = ModelResolver(models, task_types)

        assert resolver.resolve("someone/custom-model") == ModelEntry(
            type=ModelType.TEXT, url="someone/custom-model"
        )

    def test_is_known(self, models, task_types):
        resolver = ModelResolver(models, task_types)

        assert resolver.is_known("CompVis/stable-diffusion-v1-4") is True
        assert resolver.is_known("unsupported/model") is False


@pytest.mark.unit
class TestModelMetadataClient:
    def _client(self, hub) -> ModelMetadataClient:
        transport = InferenceTransport("fake-api-token", retry_delay=0, client=hub.client())
        return ModelMetadataClient(transport, METADATA_URL)

    def test_returns_pipeline_tag(self, hub):
        hub.add(
            f"{METADATA_URL}facebook/bart-large-cnn",
            httpx.Response(200, json={"id": "facebook/bart-large-cnn", "pipeline_tag": "summarization"}),
        )

        assert self._client(hub).get_pipeline_tag("facebook/bart-large-cnn") == "summarization"
        assert hub.requests[0].method == "GET"
        assert hub.requests[0].headers["Authorization"] == "Bearer fake-api-token"

    def test_missing_tag_raises(self, hub):
        hub.add(f"{METADATA_URL}org/model", httpx.Response(200, json={"id": "org/model"}))

        with pytest.raises(ModelMetadataLookupError, match="no pipeline_tag"):
            self._client(hub).get_pipeline_tag("org/model")

    def test_non_object_body_raises(self, hub):
        hub.add(f"{METADATA_URL}org/model", httpx.Response(200, json=["summarization"]))

        with pytest.raises(ModelMetadataLookupError, match="not an object"):
            self._client(hub).get_pipeline_tag("org/model")

    def test_non_json_body_raises(self, hub):
        hub.add(f"{METADATA_URL}org/model", httpx.Response(200, text="<html>"))

        with pytest.raises(ModelMetadataLookupError, match="not JSON"):
            self._client(hub).get_pipeline_tag("org/model")

    def test_error_status_raises(self, hub):
        with pytest.raises(ModelMetadataLookupError, match="status 404"):
            self._client(hub).get_pipeline_tag("org/missing")

    def test_network_error_raises_once_without_retry(self, hub):
        hub.add(f"{METADATA_URL}org/model", httpx.ConnectError("unreachable"))

        with pytest.raises(ModelMetadataLookupError):
            self._client(hub).get_pipeline_tag("org/model")

        assert len(hub.requests) == 1
