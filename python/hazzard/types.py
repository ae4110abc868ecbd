"""Pydantic models for hazzard.

- LogContext: structured fields accepted by the logging facade.
- TemplateDocument: one YAML template file loaded by YamlTemplateLocator.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class LogContext(BaseModel):
    """Context fields for structured logging.

    Example:
        >>> context = LogContext(contract="MailMessages", method="notify")
        >>> log_debug("Bound contract method", context)
    """

    contract: str | None = Field(
        default=None,
        description="Qualified name of the contract type.",
    )
    method: str | None = Field(
        default=None,
        description="Contract method name.",
    )
    message_key: str | None = Field(
        default=None,
        description="Message key the method is bound to.",
    )
    variable: str | None = Field(
        default=None,
        description="Placeholder name being resolved.",
    )
    operation: str | None = Field(
        default=None,
        description="Pipeline stage (scan, lookup, resolve, compose, send).",
    )


class TemplateDocument(BaseModel):
    """A single template file.

    Example YAML:

        name: en_us
        messages:
          notice: "New mail from %author%"
    """

    name: str = Field(description="Discriminator this document serves (locale, audience).")
    description: str | None = Field(default=None, description="Free-form description.")
    messages: dict[str, str] = Field(
        default_factory=dict,
        description="Message key to template text.",
    )

    model_config = {"extra": "forbid"}


__all__ = ["LogContext", "TemplateDocument"]
