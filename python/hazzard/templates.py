"""YAML template source.

Templates live in YAML documents, one per discriminator value (a locale, an
audience, a channel):

    # templates/en_us.yaml
    name: en_us
    messages:
      notice: "New mail from %author%: %title%"

YamlTemplateLocator loads every document under a directory once, at
construction, and serves ``(viewer, key)`` lookups from memory. The document
is chosen by ``discriminator(viewer)``; keys missing from that document fall
back to the default document.

The template directory is found in this order:
1. HAZZARD_TEMPLATE_PATH environment variable
2. ./templates in the current directory

Example:
    >>> from hazzard.templates import TemplatePath, YamlTemplateLocator
    >>>
    >>> template_dir = TemplatePath.find()
    >>> if template_dir:
    ...     locator = YamlTemplateLocator(template_dir, discriminator=lambda viewer: viewer.locale)
    ...     builder.template_locator(locator)
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .exceptions import MissingTemplateError
from .logging import log_debug, log_warn
from .types import TemplateDocument

TEMPLATE_PATH_ENV = "HAZZARD_TEMPLATE_PATH"


class TemplatePath:
    """Discovers the template directory and its files."""

    @staticmethod
    def find() -> Path | None:
        """Find the template directory.

        Returns:
            Path to the template directory, or None if not found.
        """
        env_path = os.environ.get(TEMPLATE_PATH_ENV)
        if env_path:
            path = Path(env_path)
            if path.is_dir():
                log_debug(f"Using {TEMPLATE_PATH_ENV}: {path}")
                return path
            log_warn(f"{TEMPLATE_PATH_ENV} does not exist: {env_path}")

        fallback_path = Path.cwd() / "templates"
        if fallback_path.is_dir():
            log_debug(f"Using fallback template path: {fallback_path}")
            return fallback_path

        log_debug("No template directory found")
        return None

    @staticmethod
    def discover_template_files(template_dir: Path) -> list[Path]:
        """Return every ``.yaml``/``.yml`` file under ``template_dir``, sorted.

        Searches recursively.
        """
        if not template_dir.is_dir():
            return []

        files: list[Path] = []
        for pattern in ("**/*.yaml", "**/*.yml"):
            files.extend(template_dir.glob(pattern))
        files.sort()

        log_debug(f"Discovered {len(files)} template files in {template_dir}")
        return files


def load_template_document(template_file: Path) -> TemplateDocument | None:
    """Parse one template file.

    Unreadable or invalid files are logged and skipped.

    Returns:
        The parsed document, or None if the file is not a valid document.
    """
    try:
        with template_file.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        log_warn(f"Failed to parse template {template_file}: {e}")
        return None

    if not isinstance(data, dict):
        log_warn(f"Template {template_file} is not a mapping")
        return None

    try:
        return TemplateDocument.model_validate(data)
    except ValidationError as e:
        log_warn(f"Invalid template {template_file}: {e.error_count()} errors")
        return None


class YamlTemplateLocator:
    """TemplateLocator backed by a directory of YAML documents.

    Documents sharing a name are merged; files later in sorted order win on
    conflicting keys.

    Args:
        template_dir: Directory to load documents from.
        discriminator: Maps a viewer to a document name. When omitted every
            lookup uses the default document.
        default: Name of the fallback document.
    """

    def __init__(
        self,
        template_dir: Path | str,
        discriminator: Callable[[Any], str | None] | None = None,
        default: str = "default",
    ) -> None:
        self._template_dir = Path(template_dir)
        self._discriminator = discriminator
        self._default = default
        self._documents: dict[str, dict[str, str]] = {}

        for template_file in TemplatePath.discover_template_files(self._template_dir):
            document = load_template_document(template_file)
            if document is None:
                continue
            self._documents.setdefault(document.name, {}).update(document.messages)

        log_debug(
            f"Loaded {len(self._documents)} template documents from {self._template_dir}",
            {"documents": ",".join(sorted(self._documents))},
        )

    @property
    def template_dir(self) -> Path:
        return self._template_dir

    @property
    def default(self) -> str:
        return self._default

    def document_names(self) -> list[str]:
        """Return the loaded document names, sorted."""
        return sorted(self._documents)

    def messages(self, name: str) -> dict[str, str]:
        """Return a copy of the messages of document ``name`` (empty if none)."""
        return dict(self._documents.get(name, {}))

    def __call__(self, viewer: Any, key: str) -> str:
        """Return the template of ``key`` for ``viewer``.

        Raises:
            MissingTemplateError: If neither the viewer's document nor the
                default document has ``key``.
        """
        name = self._discriminator(viewer) if self._discriminator is not None else None
        if name is not None:
            template = self._documents.get(name, {}).get(key)
            if template is not None:
                return template

        template = self._documents.get(self._default, {}).get(key)
        if template is None:
            raise MissingTemplateError(
                key,
                f"No template found for key '{key}' in document "
                f"'{name or self._default}' or default '{self._default}'",
            )
        return template

    def __repr__(self) -> str:
        return f"YamlTemplateLocator({str(self._template_dir)!r}, default={self._default!r})"


__all__ = [
    "TEMPLATE_PATH_ENV",
    "TemplatePath",
    "YamlTemplateLocator",
    "load_template_document",
]
