"""Tests for fieldwise.context module."""

import pytest

from fieldwise.context import MemberValidatorContext
from fieldwise.errors import MemberNotWritableError, ValidatorConfigurationError
from fieldwise.validators import MemberCustomValidator


def make_context(accessors, model, member, instance, localizer=None):
    validator = MemberCustomValidator(accessors.resolve(model, member))
    return validator.create_context(instance, localizer)


def test_context_reads_value(accessors, car_model):
    """Test get_value and try_get_value."""
    context = make_context(accessors, car_model, "name", car_model(name="Beetle"))

    assert isinstance(context, MemberValidatorContext)
    assert context.member_name == "name"
    assert context.get_value() == "Beetle"
    assert context.try_get_value() == (True, "Beetle")


def test_context_writes_value(accessors, car_model):
    """Test set_value and try_set_value on a writable member."""
    car = car_model(name="Beetle")
    context = make_context(accessors, car_model, "name", car)

    assert context.can_write
    context.set_value("Golf")
    assert car.name == "Golf"
    assert context.try_set_value("Polo")
    assert car.name == "Polo"


def test_context_read_only_member(accessors, sample_model):
    """Test that writes to a read-only member raise or report failure."""
    sample = sample_model(label="fixed")
    context = make_context(accessors, sample_model, "label", sample)

    assert not context.can_write
    with pytest.raises(MemberNotWritableError):
        context.set_value("changed")
    assert context.try_set_value("changed") is False
    assert sample.label == "fixed"


def test_context_frozen_model(accessors, frozen_car_model):
    """Test that frozen models are not writable."""
    context = make_context(accessors, frozen_car_model, "name", frozen_car_model(name="A"))

    assert not context.can_write
    assert context.try_set_value("B") is False


def test_fail_joins_messages(accessors, car_model):
    """Test that fail() joins messages with newlines."""
    context = make_context(accessors, car_model, "name", car_model())

    outcome = context.fail("first", "second")

    assert outcome.message == "first\nsecond"
    assert outcome.member_names == ("name",)
    assert context.is_failed
    assert context.outcome is outcome


def test_fail_without_messages(accessors, car_model):
    """Test the message used when fail() gets no messages."""
    context = make_context(accessors, car_model, "name", car_model())

    assert context.fail().message == "The field name is invalid."


def test_succeed(accessors, car_model):
    """Test that succeed() returns None and records a pass."""
    context = make_context(accessors, car_model, "name", car_model())

    assert context.succeed() is None
    assert context.is_signalled
    assert not context.is_failed


def test_outcome_can_only_be_signalled_once(accessors, car_model):
    """Test that a second pass or fail raises."""
    context = make_context(accessors, car_model, "name", car_model())
    context.succeed()

    with pytest.raises(ValidatorConfigurationError):
        context.fail("late")


def test_localize_with_localizer(accessors, car_model, localizer):
    """Test localize() with a known key."""
    context = make_context(accessors, car_model, "name", car_model(), localizer)

    assert context.localize("Custom.Greeting", "Hello {0}", "Ana") == "Hola Ana"


def test_localize_falls_back_to_default(accessors, car_model, localizer):
    """Test localize() with unknown keys and without a localizer."""
    context = make_context(accessors, car_model, "name", car_model(), localizer)
    bare = make_context(accessors, car_model, "name", car_model())

    assert context.localize("Unknown", "Hello {0}", "Ana") == "Hello Ana"
    assert context.localize(None, "Hello") == "Hello"
    assert bare.localize("Custom.Greeting", "Hello {0}", "Ana") == "Hello Ana"
