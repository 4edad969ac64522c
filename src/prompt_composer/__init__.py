"""
Prompt Composer - Hand composed instruction templates to an AI coding assistant.

A CLI tool that:
1. Loads instruction templates from a configured directory
2. Concatenates them per operation (create PR, commit, review)
3. Substitutes the caller's reason into the placeholder
4. Invokes the assistant program with the result as its single instruction
"""

__version__ = "1.0.0"
__author__ = "Prompt Composer Contributors"

from prompt_composer.composer import PromptComposer
from prompt_composer.config import ComposerConfig, load_config
from prompt_composer.errors import ConfigurationError, InvocationError, PromptComposerError
from prompt_composer.schemas import (
    ComposedInstruction,
    InvocationRequest,
    InvocationResult,
    Operation,
    TemplateDocument,
    TemplateName,
)

__all__ = [
    "__version__",
    "ComposedInstruction",
    "ComposerConfig",
    "ConfigurationError",
    "InvocationError",
    "InvocationRequest",
    "InvocationResult",
    "Operation",
    "PromptComposer",
    "PromptComposerError",
    "TemplateDocument",
    "TemplateName",
    "load_config",
]
