"""Code generation package: prompt, model call, reply coercion, fallback."""

from backend.generator.client import (
    CodeGenerationClient,
    build_chat_model,
    classify_generation_error,
)
from backend.generator.fallback import fallback_code
from backend.generator.models import GeneratedCode
from backend.generator.parser import parse_generated_code

__all__ = [
    "CodeGenerationClient",
    "GeneratedCode",
    "build_chat_model",
    "classify_generation_error",
    "fallback_code",
    "parse_generated_code",
]
