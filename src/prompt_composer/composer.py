"""
Instruction composition.

Builds the instruction text for each operation by concatenating template
documents in a fixed order:

- create-pull-request: goal line, pull-request, commit and review templates,
  then placeholder substitution with the caller's reason
- commit: the commit template unmodified
- review: a fetch-the-PR preamble followed by the review template

Every template is loaded before any text is returned, so a missing file
fails the whole composition.
"""

import logging

from prompt_composer.config import ComposerConfig
from prompt_composer.errors import missing_argument, unknown_operation
from prompt_composer.schemas import (
    ComposedInstruction,
    InvocationRequest,
    Operation,
    TemplateName,
)
from prompt_composer.template_loader import TemplateLoader
from prompt_composer.templates import (
    COMMIT_SECTION_LABEL,
    PULL_REQUEST_GOAL,
    REVIEW_SECTION_LABEL,
    SECTION_SEPARATOR,
    labelled_section,
    render_placeholder,
    review_preamble,
)

logger = logging.getLogger(__name__)

# Template order per operation
OPERATION_SOURCES: dict[Operation, tuple[TemplateName, ...]] = {
    Operation.CREATE_PULL_REQUEST: (
        TemplateName.PULL_REQUEST,
        TemplateName.COMMIT,
        TemplateName.REVIEW,
    ),
    Operation.COMMIT: (TemplateName.COMMIT,),
    Operation.REVIEW: (TemplateName.REVIEW,),
}


class PromptComposer:
    """
    Assembles instruction text from template documents.
    """

    def __init__(self, config: ComposerConfig | None = None, loader: TemplateLoader | None = None):
        """
        Initialize the composer.

        Args:
            config: Composer configuration (template directory, names, placeholder)
            loader: Template loader; built from config when omitted
        """
        self.config = config or ComposerConfig.default()
        self.loader = loader or TemplateLoader(
            directory=self.config.templates.resolved_directory(),
            file_names=self.config.templates.file_names(),
        )

    @property
    def placeholder(self) -> str:
        return self.config.templates.placeholder

    def compose_create_pull_request(self, reason: str | None = None) -> str:
        """
        Build the create-pull-request instruction.

        Args:
            reason: Text substituted for every placeholder; None means ""

        Returns:
            Composed instruction text

        Raises:
            ConfigurationError: If any of the three templates cannot be loaded
        """
        pull_request, commit, review = self.loader.load_many(
            OPERATION_SOURCES[Operation.CREATE_PULL_REQUEST]
        )

        text = SECTION_SEPARATOR.join([
            PULL_REQUEST_GOAL,
            pull_request.content,
            labelled_section(COMMIT_SECTION_LABEL, commit.content),
            labelled_section(REVIEW_SECTION_LABEL, review.content),
        ])
        return render_placeholder(text, reason, self.placeholder)

    def compose_commit(self) -> str:
        """Return the commit template unmodified."""
        return self.loader.load(TemplateName.COMMIT).content

    def compose_review(self, pull_request_ref: str) -> str:
        """
        Build the review instruction for a pull request.

        Args:
            pull_request_ref: PR number, URL or branch as understood by the GitHub CLI

        Returns:
            Preamble naming the PR followed by the review template verbatim
        """
        review = self.loader.load(TemplateName.REVIEW)
        return review_preamble(pull_request_ref) + review.content

    def compose(self, operation: Operation | str, argument: str | None = None) -> ComposedInstruction:
        """
        Compose the instruction for an operation by name.

        Args:
            operation: Operation or its name
            argument: Reason for create-pull-request, PR reference for review

        Returns:
            ComposedInstruction recording the templates used

        Raises:
            ConfigurationError: For unknown operations, a missing review
                reference, or unloadable templates
        """
        try:
            op = Operation(operation)
        except ValueError:
            raise unknown_operation(str(operation), [o.value for o in Operation])

        if op is Operation.CREATE_PULL_REQUEST:
            text = self.compose_create_pull_request(argument)
        elif op is Operation.COMMIT:
            text = self.compose_commit()
        else:
            if not argument:
                raise missing_argument(op.value, "a pull request reference")
            text = self.compose_review(argument)

        logger.debug(f"Composed {op.value} instruction ({len(text)} chars)")
        return ComposedInstruction(operation=op, text=text, sources=OPERATION_SOURCES[op])

    def build_request(
        self,
        operation: Operation | str,
        argument: str | None = None,
    ) -> InvocationRequest:
        """Compose an instruction and pair it with the configured assistant program."""
        instruction = self.compose(operation, argument)
        return InvocationRequest(
            program=self.config.assistant.program,
            args=tuple(self.config.assistant.extra_args),
            instruction=instruction,
        )
