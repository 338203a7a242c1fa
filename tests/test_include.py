# tests/test_include.py
from __future__ import annotations

import pytest

from orgdir.domain import PersonInclude, PrincipalInclude
from orgdir.exceptions import ValidationError


def test_none_means_nothing_included():
    spec = PersonInclude.coerce(None)
    assert spec.is_empty
    assert spec.principal is None
    assert not spec.include_account


@pytest.mark.parametrize(
    "principal, expect_account",
    [
        (True, False),
        ({}, False),
        ({"account": False}, False),
        ({"account": True}, True),
        ({"include": {"account": True}}, True),
        ({"include": {}}, False),
        ({"include": None}, False),
    ],
)
def test_principal_forms(principal, expect_account):
    spec = PersonInclude.coerce({"principal": principal})
    assert spec.principal is not None
    assert spec.include_account is expect_account


@pytest.mark.parametrize("principal", [False, None])
def test_principal_excluded(principal):
    spec = PersonInclude.coerce({"contacts": True, "principal": principal})
    assert spec.principal is None
    assert spec.contacts


def test_instance_passthrough():
    spec = PersonInclude(contacts=True, principal=PrincipalInclude(account=True))
    assert PersonInclude.coerce(spec) is spec
    assert not spec.is_empty


def test_unknown_key_is_a_validation_error():
    with pytest.raises(ValidationError) as ei:
        PersonInclude.coerce({"contacts": True, "passwords": True})
    assert ei.value.field == "include"


def test_unknown_principal_option_rejected():
    with pytest.raises(ValidationError):
        PersonInclude.coerce({"principal": {"secrets": True}})


def test_nested_form_rejects_sibling_options():
    with pytest.raises(ValidationError) as ei:
        PersonInclude.coerce({"principal": {"include": {}, "account": True}})
    assert ei.value.field == "include"
