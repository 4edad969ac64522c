"""
Instruction text rendering.

Fixed labels and the placeholder renderer used to assemble
template documents into a single instruction.
"""

from prompt_composer.templates.render import (
    COMMIT_SECTION_LABEL,
    DEFAULT_PLACEHOLDER,
    PULL_REQUEST_GOAL,
    REVIEW_PREAMBLE,
    REVIEW_SECTION_LABEL,
    SECTION_SEPARATOR,
    labelled_section,
    render_placeholder,
    review_preamble,
)

__all__ = [
    "COMMIT_SECTION_LABEL",
    "DEFAULT_PLACEHOLDER",
    "PULL_REQUEST_GOAL",
    "REVIEW_PREAMBLE",
    "REVIEW_SECTION_LABEL",
    "SECTION_SEPARATOR",
    "labelled_section",
    "render_placeholder",
    "review_preamble",
]
