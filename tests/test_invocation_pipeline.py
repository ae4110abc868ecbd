"""Invocation pipeline tests.

These tests verify:
- End-to-end composition and sending through a generated contract
- Returning methods, accessors, equality, hashing and repr
- Per-call failures abort the call without sending
- Builder validation and freezing
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from hazzard import (
    ConclusionValue,
    ContinuationValue,
    EmptyVariableResolution,
    Hazzard,
    IncompleteBuilderError,
    MissingMethodMappingError,
    MissingTemplateError,
    ParameterViewerLocatorResolver,
    StandardSupertypeStrategy,
    StandardVariableResolution,
    StringMessageComposer,
    UnresolvedVariableError,
    ViewerNotFoundError,
    hazzard_of,
)
from tests.contracts import (
    NOTICE_TEMPLATE,
    EmptyContract,
    MailMessages,
    PlainReceiver,
    ProtocolContract,
    Receiver,
    SimpleStringPlaceholder,
    SingleEmptyMethod,
    SingleMethodStringPlaceholders,
    StringPlaceholderValue,
    sample_email,
)


def _expected_notice(email) -> str:
    return f"Pling! You have a new mail from {email.author()}: {email.title()}"


class TestMailPipeline:
    """End-to-end tests with the mail contract."""

    def test_send_email_notification(self, mail_builder):
        """Test a void method composes and sends the message."""
        messages = mail_builder.create()
        receiver = Receiver("steve")
        email = sample_email()

        result = messages.send_email_notification(receiver, email)

        assert result is None
        assert receiver.inbox == [_expected_notice(email)]

    def test_keyword_arguments(self, mail_builder):
        """Test arguments may be passed by keyword."""
        messages = mail_builder.create()
        receiver = Receiver("steve")
        email = sample_email()

        messages.send_email_notification(mail=email, receiver=receiver)

        assert receiver.inbox == [_expected_notice(email)]

    def test_returning_method_does_not_send(self, mail_builder):
        """Test a method with a return annotation returns the message unsent."""
        messages = mail_builder.create()
        receiver = Receiver("steve")
        email = sample_email()

        result = messages.preview(receiver, email)

        assert result == f"[{email.title()}] {email.body()}"
        assert receiver.inbox == []

    def test_default_method_reaches_pipeline_through_tagged_method(self, mail_builder):
        """Test default methods run their body and call tagged methods."""
        messages = mail_builder.create()
        receivers = [Receiver("alex"), Receiver("steve")]
        email = sample_email()

        messages.notify_all(receivers, email)

        assert [r.inbox for r in receivers] == [[_expected_notice(email)], [_expected_notice(email)]]

    def test_idempotent(self, mail_builder):
        """Test repeated calls with the same input compose the same message."""
        messages = mail_builder.create()
        receiver = Receiver("steve")
        email = sample_email()

        messages.send_email_notification(receiver, email)
        messages.send_email_notification(receiver, email)

        assert receiver.inbox[0] == receiver.inbox[1]

    def test_concurrent_calls(self, mail_builder):
        """Test one instance serves concurrent calls."""
        messages = mail_builder.create()
        email = sample_email()
        receivers = [Receiver(f"r{i}") for i in range(16)]

        with ThreadPoolExecutor(max_workers=4) as pool:
            list(pool.map(lambda r: messages.send_email_notification(r, email), receivers))

        assert all(r.inbox == [_expected_notice(email)] for r in receivers)

    def test_template_locator_receives_key(self, mail_builder):
        """Test the template locator is called with the viewer and message key."""
        locator = MagicMock(return_value=NOTICE_TEMPLATE)
        messages = mail_builder.template_locator(locator).create()
        receiver = Receiver("steve")

        messages.send_email_notification(receiver, sample_email())

        locator.assert_called_once_with(receiver, "notification")


class TestGeneratedInstance:
    """Tests for the generated contract instance itself."""

    def test_is_contract_subclass(self, mail_builder):
        """Test the instance is a subclass of the contract named <Contract>Proxy."""
        messages = mail_builder.create()

        assert isinstance(messages, MailMessages)
        assert type(messages).__name__ == "MailMessagesProxy"

    def test_accessor_returns_hazzard(self, mail_builder):
        """Test methods annotated to return Hazzard return the configuration."""
        messages = mail_builder.create()

        assert isinstance(messages.hazzard(), Hazzard)
        assert messages.hazzard() is hazzard_of(messages)
        assert hazzard_of(messages).proxied_type is MailMessages

    def test_equality(self, mail_builder):
        """Test the instance equals itself and its Hazzard, nothing else."""
        messages = mail_builder.create()
        other = mail_builder.create()

        assert messages == messages
        assert messages == hazzard_of(messages)
        assert messages != other
        assert messages != "messages"

    def test_hash_is_hazzard_hash(self, mail_builder):
        """Test the instance hashes like its Hazzard."""
        messages = mail_builder.create()

        assert hash(messages) == hash(hazzard_of(messages))

    def test_repr(self, mail_builder):
        """Test repr shows the contract name and Hazzard identity."""
        messages = mail_builder.create()
        expected = f"{MailMessages.__module__}.{MailMessages.__qualname__}@{id(hazzard_of(messages)):x}"

        assert repr(messages) == expected
        assert str(messages) == expected

    def test_object_methods_do_not_enter_pipeline(self, mail_builder):
        """Test eq, hash and repr never touch the collaborators."""
        locator = MagicMock()
        messages = mail_builder.template_locator(locator).create()

        _ = messages == messages, hash(messages), repr(messages)

        locator.assert_not_called()

    def test_signature_preserved(self, mail_builder):
        """Test generated methods keep the contract's name and docstring."""
        messages = mail_builder.create()

        assert messages.preview.__name__ == "preview"

    def test_hazzard_of_rejects_other_objects(self):
        """Test hazzard_of raises for objects hazzard did not create."""
        with pytest.raises(TypeError):
            hazzard_of(object())

    def test_unmapped_method(self, mail_builder):
        """Test the handler rejects methods that were not bound."""
        messages = mail_builder.create()
        handler = hazzard_of(messages).invocation_handler

        with pytest.raises(MissingMethodMappingError) as exc_info:
            handler.invoke(messages, "notify_all", (), {})

        assert "MailMessages#notify_all" in str(exc_info.value)

    def test_protocol_contract(self, unit, template_locator, sender):
        """Test Protocol classes work as contracts."""
        composer = MagicMock(return_value="composed")
        messages = (
            Hazzard.builder(ProtocolContract)
            .viewer_lookup_service_locator(ParameterViewerLocatorResolver(), 0)
            .template_locator(template_locator)
            .composed(composer)
            .sent(sender)
            .variable_resolver(EmptyVariableResolution())
            .create()
        )

        assert messages.method(PlainReceiver()) == "composed"
        sender.assert_not_called()


class TestPipelineFailures:
    """Tests for per-call failures."""

    def test_missing_template(self, mail_builder):
        """Test a MissingTemplateError aborts the call unmodified."""

        def missing(viewer, key):
            raise MissingTemplateError(key)

        messages = mail_builder.template_locator(missing).create()
        receiver = Receiver("steve")

        with pytest.raises(MissingTemplateError) as exc_info:
            messages.send_email_notification(receiver, sample_email())

        assert exc_info.value.key == "notification"
        assert receiver.inbox == []

    def test_unresolved_variable_skips_composer_and_sender(self):
        """Test an unresolved variable aborts before composing."""
        composer = MagicMock()
        sender = MagicMock()
        messages = (
            Hazzard.builder(MailMessages)
            .viewer_lookup_service_locator(ParameterViewerLocatorResolver(Receiver), 0)
            .template_locator(lambda viewer, key: NOTICE_TEMPLATE)
            .composed(composer)
            .sent(sender)
            .variable_resolver(StandardVariableResolution(StandardSupertypeStrategy()))
            .create()
        )

        with pytest.raises(UnresolvedVariableError) as exc_info:
            messages.send_email_notification(Receiver("steve"), sample_email())

        assert exc_info.value.name == "mail"
        composer.assert_not_called()
        sender.assert_not_called()

    def test_viewer_not_found(self, mail_builder):
        """Test a None viewer argument raises ViewerNotFoundError."""
        messages = mail_builder.create()

        with pytest.raises(ViewerNotFoundError):
            messages.send_email_notification(None, sample_email())

    def test_sender_exception_propagates(self, mail_builder):
        """Test sender failures propagate unmodified."""

        def broken(viewer, message):
            raise ConnectionError("offline")

        messages = mail_builder.sent(broken).create()

        with pytest.raises(ConnectionError, match="offline"):
            messages.send_email_notification(Receiver("steve"), sample_email())

    def test_instance_usable_after_failure(self, mail_builder):
        """Test a failed call does not break later calls."""
        messages = mail_builder.create()
        receiver = Receiver("steve")

        with pytest.raises(ViewerNotFoundError):
            messages.send_email_notification(None, sample_email())
        messages.send_email_notification(receiver, sample_email())

        assert len(receiver.inbox) == 1

    def test_bad_arguments_raise_type_error(self, mail_builder):
        """Test calls that do not match the signature raise TypeError."""
        messages = mail_builder.create()

        with pytest.raises(TypeError):
            messages.send_email_notification(Receiver("steve"))


class TestSimpleContracts:
    """Tests with mocked collaborators and minimal contracts."""

    def test_empty_contract(self, template_locator, composer, sender):
        """Test a contract without methods needs no locators."""
        messages = (
            Hazzard.builder(EmptyContract)
            .template_locator(template_locator)
            .composed(composer)
            .sent(sender)
            .variable_resolver(EmptyVariableResolution())
            .create()
        )

        assert isinstance(messages, EmptyContract)

    def test_single_empty_method(self, unit, template_locator, composer, sender):
        """Test a method without parameters is sent with an empty replacement map."""
        messages = (
            Hazzard.builder(SingleEmptyMethod)
            .viewer_lookup_service_locator(lambda method, owner: lambda m, p, a: unit, 2)
            .template_locator(template_locator)
            .composed(composer)
            .sent(sender)
            .variable_resolver(EmptyVariableResolution())
            .create()
        )

        messages.method()

        template_locator.assert_called_once_with(unit, "test")
        assert composer.call_args.args[2] == {}
        sender.assert_called_once_with(unit, unit)

    def test_string_placeholders(self, template_locator, sender):
        """Test placeholders are resolved in order and passed to the composer."""
        receiver = PlainReceiver()
        template_locator.return_value = "Hello, %cringe%!"
        composer = MagicMock(wraps=StringMessageComposer())
        messages = (
            Hazzard.builder(SingleMethodStringPlaceholders)
            .viewer_lookup_service_locator(lambda method, owner: lambda m, p, a: receiver, -1)
            .template_locator(template_locator)
            .composed(composer)
            .sent(sender)
            .variable_resolver(StandardVariableResolution(StandardSupertypeStrategy()))
            .weighted_variable_resolver(str, lambda *args: None, 3)
            .weighted_variable_resolver(
                str, lambda name, value, *rest: {name: ConclusionValue(value)}, 1
            )
            .weighted_variable_resolver(
                StringPlaceholderValue,
                lambda name, value, *rest: {name: ContinuationValue(value.value(), str)},
                1,
            )
            .create()
        )

        messages.method(receiver, "first", SimpleStringPlaceholder("second"))

        template_locator.assert_called_once_with(receiver, "test")
        viewer, template, replacements, method, owner = composer.call_args.args
        assert viewer is receiver
        assert template == "Hello, %cringe%!"
        assert list(replacements.items()) == [("placeholder", "first"), ("cringe", "second")]
        assert method.name == "method"
        assert owner is SingleMethodStringPlaceholders
        sender.assert_called_once_with(receiver, "Hello, second!")


class TestBuilder:
    """Tests for HazzardBuilder validation."""

    @pytest.mark.parametrize(
        ("missing", "option"),
        [
            ("template_locator", "template_locator"),
            ("composed", "composed"),
            ("sent", "sent"),
            ("variable_resolver", "variable_resolver"),
        ],
    )
    def test_missing_required_option(self, missing, option, template_locator, composer, sender):
        """Test create() names the first missing required option."""
        builder = Hazzard.builder(EmptyContract)
        options = {
            "template_locator": template_locator,
            "composed": composer,
            "sent": sender,
            "variable_resolver": EmptyVariableResolution(),
        }
        for name, value in options.items():
            if name != missing:
                getattr(builder, name)(value)

        with pytest.raises(IncompleteBuilderError) as exc_info:
            builder.create()

        assert exc_info.value.option == option

    def test_builder_requires_class(self):
        """Test the builder rejects non-class contracts."""
        with pytest.raises(TypeError):
            Hazzard.builder("MailMessages")  # type: ignore[arg-type]

    def test_later_builder_changes_do_not_affect_instance(self, mail_builder):
        """Test registries are frozen at create()."""
        messages = mail_builder.create()
        mail_builder.weighted_variable_resolver(str, lambda *args: None, 2**31)

        receiver = Receiver("steve")
        messages.send_email_notification(receiver, sample_email())

        assert receiver.inbox == [_expected_notice(sample_email())]

    def test_build_returns_hazzard(self, mail_builder):
        """Test build() returns the frozen configuration."""
        hazzard = mail_builder.build()

        assert isinstance(hazzard, Hazzard)
        assert sorted(hazzard.scanned_methods) == ["preview", "send_email_notification"]
        assert hazzard.describe()["methods"] == {
            "preview": "preview",
            "send_email_notification": "notification",
        }
