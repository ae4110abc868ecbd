"""Example contracts shared by the test suite.

Contracts are declared at module level so their annotations resolve when the
contract is scanned.
"""

from tests.contracts.mail import (
    NOTICE_TEMPLATE,
    PREVIEW_TEMPLATE,
    Email,
    Mail,
    MailMessages,
    Receiver,
    mail_resolver,
    mail_template_locator,
    sample_email,
)
from tests.contracts.simple import (
    DEFAULT_VALUE,
    MESSAGE_KEY,
    DefaultMethodContract,
    DefaultMethodOneParam,
    EmptyContract,
    ListContract,
    Named,
    NamedContract,
    PlainReceiver,
    Player,
    ProtocolContract,
    SimpleStringPlaceholder,
    SingleEmptyMethod,
    SingleMethodStringPlaceholders,
    StringPlaceholderValue,
    TwoStringsContract,
    UnannotatedContract,
    UntaggedContract,
    ViewerlessContract,
)

__all__ = [
    "NOTICE_TEMPLATE",
    "PREVIEW_TEMPLATE",
    "Email",
    "Mail",
    "MailMessages",
    "Receiver",
    "mail_resolver",
    "mail_template_locator",
    "sample_email",
    "DEFAULT_VALUE",
    "MESSAGE_KEY",
    "DefaultMethodContract",
    "DefaultMethodOneParam",
    "EmptyContract",
    "ListContract",
    "Named",
    "NamedContract",
    "PlainReceiver",
    "Player",
    "ProtocolContract",
    "SimpleStringPlaceholder",
    "SingleEmptyMethod",
    "SingleMethodStringPlaceholders",
    "StringPlaceholderValue",
    "TwoStringsContract",
    "UnannotatedContract",
    "UntaggedContract",
    "ViewerlessContract",
]
