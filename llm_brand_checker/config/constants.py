"""
Configuration constants for LLM Brand Checker.

This module contains global constants used across the application
to avoid tight coupling between modules.
"""

DEFAULT_MODEL_NAME = "gemini-2.5-flash"

DEFAULT_API_KEY_ENV = "GEMINI_API_KEY"

# Environment overrides applied on top of the YAML file
MODEL_ENV = "GEMINI_MODEL"
TEMPERATURE_ENV = "GEMINI_TEMPERATURE"

# Answer text used when no provider call is made or the call fails
FALLBACK_TEXT = "No clear brand mentions found."

# Maximum prompt length to prevent excessive API costs
MAX_PROMPT_LENGTH = 100_000
