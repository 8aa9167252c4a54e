# Data models for hf_inference
from .inference import (
    ErrorKind,
    InferenceFailure,
    InferenceOutcome,
    ModelEntry,
    ModelType,
    NormalizedResult,
    PayloadStyle,
    TextResult,
)

__all__ = [
    "ModelType",
    "PayloadStyle",
    "ModelEntry",
    "TextResult",
    "NormalizedResult",
    # Failure reporting
    "ErrorKind",
    "InferenceFailure",
    "InferenceOutcome",
]
