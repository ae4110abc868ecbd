"""pytest configuration and fixtures for hazzard tests.

This module provides shared fixtures: an EventBridge, mocked pipeline
collaborators and a builder preconfigured for the mail contract.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest

from tests.contracts import Mail, MailMessages, Receiver, mail_resolver, mail_template_locator

if TYPE_CHECKING:
    from hazzard import EventBridge, HazzardBuilder


@pytest.fixture(scope="session")
def hazzard_module():
    """Provide the hazzard module as a fixture."""
    import hazzard

    return hazzard


@pytest.fixture
def event_bridge() -> EventBridge:
    """Provide a fresh EventBridge for each test."""
    from hazzard import EventBridge

    return EventBridge()


@pytest.fixture
def unit() -> object:
    """Provide an opaque value used as viewer, template and message."""
    return object()


@pytest.fixture
def template_locator(unit) -> MagicMock:
    """Provide a template locator mock returning ``unit``."""
    return MagicMock(return_value=unit)


@pytest.fixture
def composer(unit) -> MagicMock:
    """Provide a message composer mock returning ``unit``."""
    return MagicMock(return_value=unit)


@pytest.fixture
def sender() -> MagicMock:
    """Provide a message sender mock."""
    return MagicMock(return_value=None)


@pytest.fixture
def mail_builder() -> HazzardBuilder:
    """Provide a builder for MailMessages with string and mail resolvers."""
    from hazzard import (
        Hazzard,
        ParameterViewerLocatorResolver,
        StandardSupertypeStrategy,
        StandardVariableResolution,
        StringMessageComposer,
        identity_resolver,
    )

    return (
        Hazzard.builder(MailMessages)
        .viewer_lookup_service_locator(ParameterViewerLocatorResolver(Receiver), 1)
        .template_locator(mail_template_locator)
        .composed(StringMessageComposer())
        .sent(lambda receiver, message: receiver.send_message(message))
        .variable_resolver(
            StandardVariableResolution(StandardSupertypeStrategy(interfaces_first=True))
        )
        .weighted_variable_resolver(str, identity_resolver, -(2**31))
        .weighted_variable_resolver(Mail, mail_resolver, 0)
    )
