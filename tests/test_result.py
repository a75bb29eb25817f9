"""Tests for fieldwise.result module."""

import pydantic
import pytest

from fieldwise import MemberValidationOutcome, ModelValidationResult


def make_outcome(message: str, name: str = "name") -> MemberValidationOutcome:
    return MemberValidationOutcome(message=message, member_names=(name,))


def test_outcome_is_frozen():
    """Test that outcomes cannot be changed after creation."""
    outcome = make_outcome("bad")

    assert str(outcome) == "bad"
    with pytest.raises(pydantic.ValidationError):
        outcome.message = "changed"


def test_result_queries():
    """Test the read API of a populated result."""
    result = ModelValidationResult(
        {"name": [make_outcome("a"), make_outcome("b")], "id": [make_outcome("c", "id")]}
    )

    assert not result.is_valid
    assert result.error_count == 3
    assert result.field_names == ("name", "id")
    assert [o.message for o in result.for_field("name")] == ["a", "b"]
    assert result["id"] == result.for_field("id")
    assert "id" in result
    assert "email" not in result
    assert result.for_field("email") == ()
    assert result.to_dict() == {"name": ["a", "b"], "id": ["c"]}


def test_add_message_creates_outcome():
    """Test that add() accepts plain messages."""
    result = ModelValidationResult()

    assert result.add("SomeField", "manual error") is result

    assert result.error_count == 1
    (outcome,) = result["SomeField"]
    assert outcome.member_names == ("SomeField",)


def test_add_refreshes_error_count():
    """Test that the cached count is recomputed after add()."""
    result = ModelValidationResult({"name": [make_outcome("a")]})
    assert result.error_count == 1

    result.add("name", make_outcome("b")).add("id", make_outcome("c", "id"))

    assert result.error_count == 3
    assert result.field_names == ("name", "id")


@pytest.mark.parametrize(
    "name,outcome",
    [
        ("name", None),
        ("", "message"),
        ("   ", "message"),
        ("name", "   "),
    ],
)
def test_add_ignores_blank_input(name, outcome):
    """Test that None outcomes and blank names or messages are ignored."""
    result = ModelValidationResult()

    result.add(name, outcome)

    assert result.is_valid
    assert result.field_names == ()


def test_empty_result_is_shared_and_read_only():
    """Test the shared empty result."""
    empty = ModelValidationResult.EMPTY

    assert empty.is_valid
    assert empty.error_count == 0
    assert empty.to_dict() == {}
    with pytest.raises(TypeError):
        empty.add("name", "message")


def test_repr():
    """Test the result repr."""
    result = ModelValidationResult({"name": [make_outcome("a")]})

    assert repr(result) == (
        "ModelValidationResult(is_valid=False, error_count=1, fields=['name'])"
    )
