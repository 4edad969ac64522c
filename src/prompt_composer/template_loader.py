"""
Template document loading.

Templates are read from disk on every call so edits take effect on the
next invocation. Any failure to read a template is a ConfigurationError.
"""

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from prompt_composer.errors import (
    template_dir_not_found,
    template_encoding_error,
    template_not_found,
    template_unreadable,
)
from prompt_composer.schemas import TemplateDocument, TemplateName, TemplateStatus
from prompt_composer.templates import DEFAULT_PLACEHOLDER

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAMES: dict[TemplateName, str] = {
    TemplateName.PULL_REQUEST: "PullRequest.md",
    TemplateName.COMMIT: "Commit.md",
    TemplateName.REVIEW: "ReviewPR.md",
}


class TemplateLoader:
    """
    Reads template documents from a directory.
    """

    def __init__(
        self,
        directory: Path,
        file_names: Mapping[TemplateName, str] | None = None,
    ):
        """
        Initialize the loader.

        Args:
            directory: Directory holding the template files
            file_names: File name for each template (defaults to DEFAULT_FILE_NAMES)
        """
        self.directory = directory
        self.file_names = dict(DEFAULT_FILE_NAMES)
        if file_names:
            self.file_names.update(file_names)

    def path_for(self, name: TemplateName) -> Path:
        """Get full path for a template file."""
        return self.directory / self.file_names[name]

    def load(self, name: TemplateName) -> TemplateDocument:
        """
        Load one template document.

        Args:
            name: Template to load

        Returns:
            TemplateDocument with the file's current content

        Raises:
            ConfigurationError: If the directory or file is missing or unreadable
        """
        if not self.directory.is_dir():
            raise template_dir_not_found(str(self.directory))

        path = self.path_for(name)
        if not path.exists():
            raise template_not_found(name.value, str(path))
        if not path.is_file():
            raise template_unreadable(name.value, str(path), "not a regular file")

        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            raise template_encoding_error(name.value, str(path))
        except OSError as e:
            raise template_unreadable(name.value, str(path), e.strerror or str(e))

        logger.debug(f"Loaded template {name.value} from {path} ({len(content)} chars)")
        return TemplateDocument(name=name, path=str(path), content=content)

    def load_many(self, names: Iterable[TemplateName]) -> list[TemplateDocument]:
        """Load templates in the given order, failing on the first error."""
        return [self.load(name) for name in names]

    def status(self, placeholder: str = DEFAULT_PLACEHOLDER) -> list[TemplateStatus]:
        """
        Report presence of every configured template.

        Args:
            placeholder: Marker to look for in each file

        Returns:
            One TemplateStatus per template, in TemplateName order
        """
        statuses = []
        for name in TemplateName:
            path = self.path_for(name)
            if not path.is_file():
                statuses.append(TemplateStatus(name=name, path=str(path), exists=False))
                continue

            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Could not read {path}: {e}")
                content = ""

            statuses.append(TemplateStatus(
                name=name,
                path=str(path),
                exists=True,
                size_bytes=path.stat().st_size,
                has_placeholder=placeholder in content,
            ))
        return statuses
