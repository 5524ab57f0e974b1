"""
Entry point for running LLM Brand Checker as a module.

Enables execution via:
    python -m llm_brand_checker [command] [options]

This is equivalent to running the installed CLI:
    llm-brand-checker [command] [options]

Examples:
    python -m llm_brand_checker --help
    python -m llm_brand_checker check "Best CRM tools?" HubSpot
    python -m llm_brand_checker match HubSpot --file answer.txt
"""

from llm_brand_checker.cli import app

if __name__ == "__main__":
    app()
