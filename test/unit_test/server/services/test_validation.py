"""Unit tests for registration input validation."""

import pytest

from prs_online.server.schemas import RegisterInput
from prs_online.server.services.validation import validate_register


def _input(username="jdoe", email="jdoe@example.com", password="secret") -> RegisterInput:
    return RegisterInput(username=username, email=email, password=password)


def test_valid_input_has_no_errors():
    assert validate_register(_input()) is None


@pytest.mark.parametrize(
    "options,field,message",
    [
        (_input(email="jdoe.example.com"), "email", "Invalid email"),
        (_input(username="jd"), "username", "Length must be greater than 2"),
        (_input(username="j@doe"), "username", "Cannot include an @"),
        (_input(password="pw"), "password", "Length must be greater than 2"),
        (_input(password="p" * 73), "password", "Length must be at most 72 bytes"),
        (_input(password="\u00e9" * 37), "password", "Length must be at most 72 bytes"),
    ],
)
def test_invalid_input(options, field, message):
    errors = validate_register(options)

    assert errors is not None
    assert len(errors) == 1
    assert errors[0].field == field
    assert errors[0].message == message


def test_first_failing_rule_wins():
    errors = validate_register(_input(username="x", email="bad", password="p"))
    assert [e.field for e in errors] == ["email"]
