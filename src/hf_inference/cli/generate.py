#!/usr/bin/env python3
"""CLI for calling a Hugging Face model from the terminal.

Usage:
    # Chat with a pre-configured model
    hf-inference "Hello!" --model meta-llama/Meta-Llama-3-8B-Instruct

    # Summarize with any Hub model, passing generation parameters
    hf-inference "Long article..." --model facebook/bart-large-cnn --param max_length=60

    # Generate an image and save it
    hf-inference "a red fox in the snow" --model CompVis/stable-diffusion-v1-4 --output fox.png
"""

import argparse
import base64
import json
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from hf_inference.models.inference import ModelType, TextResult
from hf_inference.services.inference_service import HuggingFaceService
from hf_inference.services.response_normalizer import IMAGE_DATA_URI_PREFIX
from hf_inference.utils.config import load_config, validate_config
from hf_inference.utils.logging import setup_logging

console = Console()


def parse_param(value: str) -> tuple[str, object]:
    """Parse a KEY=VALUE argument. VALUE is read as JSON when possible."""
    key, sep, raw = value.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Expected KEY=VALUE, got '{value}'")
    try:
        return key, json.loads(raw)
    except json.JSONDecodeError:
        return key, raw


def build_options(args: argparse.Namespace) -> dict:
    """Turn parsed arguments into call options."""
    options: dict = {}
    if args.type:
        options["type"] = args.type
    if args.param:
        options["parameters"] = dict(args.param)
    if args.max_tokens is not None:
        options["max_tokens"] = args.max_tokens
    return options


def save_image(data_uri: str, output: Path) -> int:
    """Decode a PNG data URI to a file. Returns the number of bytes written."""
    data = base64.b64decode(data_uri[len(IMAGE_DATA_URI_PREFIX):])
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(data)
    return len(data)


def show_result(result, args: argparse.Namespace) -> None:
    """Print or save a normalized result."""
    if isinstance(result, TextResult):
        if args.raw:
            console.print(Syntax(json.dumps(result.to_dict(), indent=2), "json"))
        else:
            console.print(Panel(result.text or "", title=args.model, expand=False))
        return

    if args.output:
        size = save_image(result, Path(args.output))
        console.print(f"[green]✓ Saved {size:,} bytes to {args.output}[/green]")
    else:
        console.print(result, soft_wrap=True)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hf-inference",
        description="Call a Hugging Face hosted text or image model",
    )
    parser.add_argument("prompt", help="Prompt to send to the model")
    parser.add_argument("--model", "-m", required=True, help="Model identifier")
    parser.add_argument(
        "--type",
        choices=[t.value for t in ModelType],
        help="Model type for models that are not pre-configured",
    )
    parser.add_argument(
        "--param",
        "-p",
        action="append",
        type=parse_param,
        metavar="KEY=VALUE",
        help="Request parameter merged into the payload (repeatable)",
    )
    parser.add_argument("--max-tokens", type=int, help="Completion limit for chat models")
    parser.add_argument("--output", "-o", help="File to write image results to")
    parser.add_argument("--raw", action="store_true", help="Print the result or failure as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = create_parser().parse_args(argv)

    config = load_config()
    setup_logging(
        "DEBUG" if args.verbose else config["log_level"],
        json_output=args.json_logs or config["json_logs"],
    )

    errors = validate_config(config)
    if errors:
        for error in errors:
            console.print(f"[red]Error: {error}[/red]")
        console.print("[dim]Set HUGGINGFACE_API_KEY in your .env file[/dim]")
        return 1

    with HuggingFaceService.from_config(config) as service:
        outcome = service.get_result(args.prompt, args.model, build_options(args))

    if not outcome.ok:
        if args.raw and outcome.error:
            console.print(Syntax(json.dumps(outcome.error.to_dict(), indent=2), "json"))
        else:
            message = outcome.error.message if outcome.error else "No result returned"
            console.print(f"[red]✗ {message}[/red]")
        return 1

    show_result(outcome.value, args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
