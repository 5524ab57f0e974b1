"""
Structured JSON logging for LLM Brand Checker.

Every log line is one JSON object on stderr, so stdout stays clean for the
check result (which may itself be JSON in --format json mode).

Log line fields:
    timestamp  UTC, ISO 8601 with 'Z'
    level      DEBUG / INFO / WARNING / ERROR
    component  logger name, e.g. "llm_brand_checker.llm_runner.runner"
    message    rendered message
    context    optional dict passed via log_with_context()
    exception  formatted traceback, when logged with exc_info

Gemini API keys travel in the request URL, so they are the main thing that
could leak into a log line. Every record passes through SecretRedactingFilter
before formatting.

Examples:
    >>> from llm_brand_checker.utils.logging import setup_logging, get_logger
    >>> setup_logging(verbose=True)
    >>> log_with_context(get_logger("cli"), logging.INFO, "Brand check finished",
    ...                  context={"brand": "Acme", "positions": [2]})
"""

import json
import logging
import re
import sys
from typing import Any

from llm_brand_checker.utils.time import utc_timestamp

# (pattern, replacement template); {last4} is the tail of the matched secret
SECRET_PATTERNS: list[tuple[re.Pattern, str]] = [
    # Google API keys (Gemini)
    (re.compile(r"\bAIza[0-9A-Za-z_-]{20,}"), "AIza...{last4}"),
    (re.compile(r"\bsk-[a-zA-Z0-9_-]{20,}\b"), "sk-...{last4}"),
    (re.compile(r"\bBearer\s+[a-zA-Z0-9_-]{20,}\b"), "Bearer ***{last4}"),
    # ?key=... / &key=... in request URLs
    (re.compile(r"(?<=[?&]key=)[^&\s\"']+"), "***{last4}"),
    (re.compile(r"\b[a-zA-Z0-9_-]{32,}\b"), "***{last4}"),
]


def redact_secrets(text: str) -> str:
    """
    Mask anything that looks like a credential, keeping the last 4 chars.

    Example:
        >>> redact_secrets("calling ...:generateContent?key=AIzaSyD0123456789abcdefghij")
        'calling ...:generateContent?key=***ghij'
    """
    for pattern, template in SECRET_PATTERNS:
        text = pattern.sub(lambda m, t=template: t.format(last4=m.group(0)[-4:]), text)
    return text


def _redact_value(value: Any) -> Any:
    if isinstance(value, str):
        return redact_secrets(value)
    if isinstance(value, dict):
        return {k: _redact_value(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return type(value)(_redact_value(v) for v in value)
    return value


class JSONFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": utc_timestamp(),
            "level": record.levelname,
            "component": record.name,
            "message": record.getMessage(),
        }

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # Provider error bodies in context may hold non-JSON values
        return json.dumps(entry, ensure_ascii=False, default=str)


class SecretRedactingFilter(logging.Filter):
    """
    Redact credentials from message, args and context before formatting.

    Always returns True: records are rewritten, never dropped.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = redact_secrets(str(record.msg))

        if isinstance(record.args, dict):
            record.args = {k: redact_secrets(str(v)) for k, v in record.args.items()}
        elif isinstance(record.args, tuple):
            record.args = tuple(redact_secrets(str(arg)) for arg in record.args)

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            record.context = _redact_value(context)

        return True


def setup_logging(verbose: bool = False, quiet_logs: bool = False) -> None:
    """
    Install the JSON stderr handler on the root logger.

    Replaces any handlers already on the root logger, so calling it once per
    CLI invocation never duplicates lines.

    Args:
        verbose: DEBUG level (wins over quiet_logs)
        quiet_logs: WARNING level, used in human mode so INFO lines don't
            interleave with the Rich output
    """
    if verbose:
        level = logging.DEBUG
    elif quiet_logs:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(SecretRedactingFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)


def get_logger(component: str) -> logging.Logger:
    return logging.getLogger(component)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    context: dict[str, Any] | None = None,
) -> None:
    """Log `message` with a structured `context` dict attached to the record."""
    extra = {"context": context} if context is not None else None
    logger.log(level, message, extra=extra)
