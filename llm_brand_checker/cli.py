"""
CLI entrypoint for LLM Brand Checker.

Provides a dual-mode command-line interface with:
- Human-friendly output: Rich spinner, panels, colored text
- Agent-friendly output: Structured JSON for AI automation
- Quiet mode: Tab-separated minimal output for shell scripts

Commands:
    check: Ask the model a prompt and report where the brand appears
    match: Run the matcher over text you already have (no API call)
    validate: Validate configuration without calling the provider

Exit codes:
    0: Success
    1: Configuration error (invalid YAML, bad values)
    2: Invalid request (missing prompt, brand or input text)
    3: Provider failure (result still printed, with fallback text)

Examples:
    # Human-friendly output
    llm-brand-checker check "Best CRM tools for startups?" HubSpot

    # Agent-friendly JSON output
    llm-brand-checker check "Best CRM tools?" HubSpot --format json

    # Offline matching over a saved answer or raw provider payload
    llm-brand-checker match HubSpot --file answer.txt
    llm-brand-checker match HubSpot --file response.json --payload

Security:
    - API keys are loaded from environment variables only
    - Errors may contain file paths but never API keys
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

import typer
from rich.traceback import install as install_rich_traceback

from llm_brand_checker.config.loader import load_config
from llm_brand_checker.exceptions import (
    ConfigFileNotFoundError,
    ConfigurationError,
    InvalidCheckRequestError,
)
from llm_brand_checker.extractor.parser import check_response, check_text
from llm_brand_checker.llm_runner.runner import CheckRequest, run_check
from llm_brand_checker.utils.console import (
    error,
    info,
    output_mode,
    print_banner,
    print_check_result,
    spinner,
    success,
    warning,
)
from llm_brand_checker.utils.logging import get_logger, log_with_context, setup_logging

# Install Rich tracebacks for better error messages
install_rich_traceback(show_locals=False)

logger = get_logger("llm_brand_checker.cli")

# Exit codes
EXIT_SUCCESS = 0  # Check completed
EXIT_CONFIG_ERROR = 1  # Config validation failed
EXIT_INVALID_REQUEST = 2  # Missing prompt/brand/input
EXIT_PROVIDER_ERROR = 3  # Provider call failed, fallback result printed

app = typer.Typer(
    name="llm-brand-checker",
    help="Check whether LLM answers mention your brand, and where",
    add_completion=False,
)


def _configure_output(format: str, quiet: bool, verbose: bool) -> None:
    if format not in ("text", "json"):
        raise typer.BadParameter(
            f"Invalid format: {format}. Must be 'text' or 'json'",
            param_hint="--format",
        )
    output_mode.format = format
    output_mode.quiet = quiet
    # Suppress INFO logs in human mode (unless verbose=True)
    setup_logging(verbose=verbose, quiet_logs=output_mode.is_human())


def _fail(message: str, error_type: str, exit_code: int) -> None:
    error(message)
    if output_mode.is_agent():
        output_mode.add_json("error_type", error_type)
        output_mode.flush_json()
    raise typer.Exit(exit_code)


def _read_input(file: Path | None, text: str | None) -> str:
    if file is not None and text is not None:
        raise InvalidCheckRequestError("Use either --file or --text, not both")
    if text is not None:
        return text
    if file is not None:
        try:
            return file.read_text(encoding="utf-8")
        except OSError as e:
            raise InvalidCheckRequestError(f"Cannot read {file}: {e}") from e
    return sys.stdin.read()


@app.command()
def check(
    prompt: str = typer.Argument(..., help="Prompt to send to the model"),
    brand: str = typer.Argument(..., help="Brand name to look for in the answer"),
    config: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to YAML configuration file (optional)",
        dir_okay=False,
    ),
    format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: 'text' (human-friendly) or 'json' (machine-readable)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Minimal output (tab-separated values)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
):
    """
    Ask the model PROMPT and report where BRAND appears in the answer.

    Without an API key in the environment, the answer is a fixed fallback
    text, so the brand is simply reported as not mentioned.

    Exit codes:
      0: Check completed
      1: Configuration error
      2: Missing prompt or brand
      3: Provider call failed (fallback result still printed)
    """
    _configure_output(format, quiet, verbose)
    print_banner(_read_version())

    try:
        request = CheckRequest(prompt=prompt, brand=brand)
    except InvalidCheckRequestError as e:
        _fail(str(e), "invalid_request", EXIT_INVALID_REQUEST)

    try:
        runtime_config = load_config(config)
    except ConfigFileNotFoundError as e:
        _fail(str(e), "file_not_found", EXIT_CONFIG_ERROR)
    except ConfigurationError as e:
        _fail(str(e), "validation_error", EXIT_CONFIG_ERROR)

    if not runtime_config.has_api_key:
        warning(
            f"${runtime_config.env_api_key} is not set; "
            "matching against the fallback answer"
        )

    with spinner(f"Asking {runtime_config.model_name}..."):
        result = asyncio.run(run_check(request, runtime_config))

    log_with_context(
        logger,
        logging.INFO,
        "Brand check finished",
        context={
            "brand": result.brand,
            "model": result.used_model,
            "mentioned": result.mentioned,
            "positions": result.positions,
            "provider_status": result.provider_status,
        },
    )

    print_check_result(result.to_dict())

    if result.failed:
        raise typer.Exit(EXIT_PROVIDER_ERROR)
    raise typer.Exit(EXIT_SUCCESS)


@app.command()
def match(
    brand: str = typer.Argument(..., help="Brand name to look for"),
    file: Path = typer.Option(
        None,
        "--file",
        "-i",
        help="Read the answer from this file (default: stdin)",
        exists=True,
        dir_okay=False,
    ),
    text: str = typer.Option(
        None,
        "--text",
        "-t",
        help="Answer text given inline",
    ),
    payload: bool = typer.Option(
        False,
        "--payload",
        "-p",
        help="Treat the input as a raw JSON provider response and normalize it first",
    ),
    format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: 'text' or 'json'",
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Tab-separated output"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Match BRAND against an answer you already have, without calling a model.

    Examples:
      echo "1. Globex\\n2. Acme" | llm-brand-checker match Acme
      llm-brand-checker match Acme --text "Acme, Globex, Initech" --format json
      llm-brand-checker match Acme --file response.json --payload
    """
    _configure_output(format, quiet, verbose)

    if not brand or brand.isspace():
        _fail("Missing brand", "invalid_request", EXIT_INVALID_REQUEST)

    try:
        raw_input = _read_input(file, text)
    except InvalidCheckRequestError as e:
        _fail(str(e), "invalid_request", EXIT_INVALID_REQUEST)

    if payload:
        try:
            raw = json.loads(raw_input)
        except json.JSONDecodeError as e:
            _fail(f"Input is not valid JSON: {e}", "invalid_payload", EXIT_INVALID_REQUEST)
        answer_text, result = check_response(raw, brand)
    else:
        answer_text = raw_input
        result = check_text(answer_text, brand)

    print_check_result(
        {"brand": brand, **result.to_dict(), "raw_text": answer_text},
        show_text=payload,
    )
    raise typer.Exit(EXIT_SUCCESS)


@app.command()
def validate(
    config: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to YAML configuration file (optional)",
        dir_okay=False,
    ),
    format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: 'text' or 'json'",
    ),
):
    """
    Validate configuration without calling the provider.

    Checks YAML syntax, field values and whether the API key variable is set.

    Exit codes:
      0: Configuration is valid
      1: Configuration is invalid
    """
    _configure_output(format, quiet=False, verbose=False)

    try:
        runtime_config = load_config(config)
    except ConfigFileNotFoundError as e:
        if output_mode.is_agent():
            output_mode.add_json("valid", False)
        _fail(str(e), "file_not_found", EXIT_CONFIG_ERROR)
    except ConfigurationError as e:
        if output_mode.is_agent():
            output_mode.add_json("valid", False)
        _fail(str(e), "validation_error", EXIT_CONFIG_ERROR)

    success("Configuration is valid")
    info(f"Model: {runtime_config.model_name}")
    info(f"Temperature: {runtime_config.temperature}")
    info(f"Max output tokens: {runtime_config.max_output_tokens}")
    if runtime_config.has_api_key:
        info(f"API key: set (${runtime_config.env_api_key})")
    else:
        warning(f"API key: ${runtime_config.env_api_key} is not set")

    if output_mode.is_agent():
        output_mode.add_json("valid", True)
        output_mode.add_json("model_name", runtime_config.model_name)
        output_mode.add_json("temperature", runtime_config.temperature)
        output_mode.add_json("max_output_tokens", runtime_config.max_output_tokens)
        output_mode.add_json("api_key_set", runtime_config.has_api_key)
        output_mode.flush_json()

    raise typer.Exit(EXIT_SUCCESS)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
):
    """
    LLM Brand Checker - find your brand in LLM answers.

    Use 'llm-brand-checker COMMAND --help' for detailed command documentation.
    """
    if version:
        from rich.console import Console

        Console().print(
            f"[bold cyan]llm-brand-checker[/bold cyan] version {_read_version()}"
        )
        raise typer.Exit(EXIT_SUCCESS)

    if ctx.invoked_subcommand is None:
        from rich.console import Console

        console = Console()
        console.print("[yellow]Use --help to see available commands[/yellow]")
        console.print()
        console.print("Commands:")
        console.print("  check     Ask a model and report where the brand appears")
        console.print("  match     Match a brand against text you already have")
        console.print("  validate  Validate configuration without calling the model")


def _read_version() -> str:
    """Read version from package metadata (pyproject.toml)."""
    try:
        from importlib.metadata import version

        return version("llm-brand-checker")
    except Exception:
        # Fallback if package metadata is not available
        return "0.1.0"


if __name__ == "__main__":
    app()
