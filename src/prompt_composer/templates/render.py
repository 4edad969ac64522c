"""
Placeholder rendering and fixed instruction text.

Rendering is a literal, single-pass find-and-replace of one marker. There
are no conditionals, loops or nested substitutions.
"""

DEFAULT_PLACEHOLDER = "<REASON>"

PULL_REQUEST_GOAL = "Key goal: create Pull Request"
COMMIT_SECTION_LABEL = "Commit instructions:"
REVIEW_SECTION_LABEL = "Review instructions:"
REVIEW_PREAMBLE = (
    "Use Github CLI to retrieve {ref} PR details then conduct a review of the PR "
    "using the following prompt: "
)

SECTION_SEPARATOR = "\n\n"


def render_placeholder(
    text: str,
    value: str | None,
    placeholder: str = DEFAULT_PLACEHOLDER,
) -> str:
    """
    Replace every occurrence of a placeholder with a value.

    Args:
        text: Text containing zero or more placeholders
        value: Replacement; None is treated as the empty string
        placeholder: Marker to replace

    Returns:
        Text with all placeholders replaced. Placeholders inside ``value``
        are left as-is.

    Raises:
        ValueError: If placeholder is empty
    """
    if not placeholder:
        raise ValueError("placeholder must be a non-empty string")
    return text.replace(placeholder, value or "")


def labelled_section(label: str, body: str) -> str:
    """Prefix a section body with its label line."""
    return f"{label}\n{body}"


def review_preamble(pull_request_ref: str) -> str:
    """Sentence asking the assistant to fetch a pull request before reviewing it."""
    return REVIEW_PREAMBLE.format(ref=pull_request_ref)
