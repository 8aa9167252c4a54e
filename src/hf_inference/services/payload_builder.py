"""Request body construction for inference calls."""

from typing import Any, Mapping, Optional

from hf_inference.models.inference import ModelEntry, PayloadStyle

DEFAULT_MAX_TOKENS = 500


def _previous_messages(options: Mapping) -> list:
    """Return caller-supplied chat history, or [] if any message is malformed."""
    messages = options.get("previous_messages")
    if messages is None:
        messages = options.get("previous_message")  # legacy key
    if not messages or not isinstance(messages, (list, tuple)):
        return []

    for message in messages:
        if not isinstance(message, Mapping) or "role" not in message or "content" not in message:
            return []
    return [dict(message) for message in messages]


def build_inputs_payload(prompt: str) -> dict[str, Any]:
    """Generic payload: {"inputs": prompt}."""
    return {"inputs": prompt}


def build_chat_payload(prompt: str, options: Mapping, model: str = "") -> dict[str, Any]:
    """Chat-completion payload with optional prior turns.

    The current prompt is always the last user message. Streaming is never
    requested.
    """
    messages = _previous_messages(options)
    messages.append({"role": "user", "content": prompt})

    return {
        "model": model,
        "messages": messages,
        "max_tokens": options.get("max_tokens", DEFAULT_MAX_TOKENS),
        "stream": False,
    }


def build_payload(
    prompt: str,
    options: Optional[Mapping] = None,
    entry: Optional[ModelEntry] = None,
    model: str = "",
) -> dict[str, Any]:
    """Build the request body for a call.

    Args:
        prompt: User prompt
        options: Call options. "parameters" entries are merged into the body
            last, so they can overwrite any key (including "inputs").
        entry: Resolved model; its payload style picks the body shape
        model: Model identifier, used by chat payloads

    Returns:
        JSON-serializable request body
    """
    options = options or {}
    style = entry.payload if entry is not None else PayloadStyle.INPUTS

    if style == PayloadStyle.CHAT:
        payload = build_chat_payload(prompt, options, model)
    else:
        payload = build_inputs_payload(prompt)

    parameters = options.get("parameters")
    if parameters:
        payload.update(parameters)

    return payload
