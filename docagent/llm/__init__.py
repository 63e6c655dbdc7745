"""LLM documentation generation."""

from .generator import (
    DocumentationGenerator,
    EmptyResponseError,
    GenerationError,
    GenerationFailure,
    GenerationTimeoutError,
)

__all__ = [
    "DocumentationGenerator",
    "EmptyResponseError",
    "GenerationError",
    "GenerationFailure",
    "GenerationTimeoutError",
]
