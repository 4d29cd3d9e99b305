"""Contact Rules — tests for pure validation, normalization and search.

Tests cover:
    - validate_draft rejects empty/whitespace names, accepts padded names
    - normalize_draft trims, converts blanks to None, never truncates, is idempotent
    - filter_contacts: empty query, case folding, phone raw match, absent fields
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from contactbook.core.contact_rules import (
    contact_matches, filter_contacts, normalize_draft, validate_draft,
)
from contactbook.core.domain_types import (
    ContactDraft, ContactFields, ContactId, ContactRecord, UserId,
)
from contactbook.core.errors import ContactValidationError

_BASE = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _contact(name, email=None, phone=None, company=None, notes=None, age=0):
    return ContactRecord(
        id=ContactId(uuid4()),
        owner=UserId(uuid4()),
        name=name,
        email=email,
        phone=phone,
        company=company,
        notes=notes,
        created_at=_BASE - timedelta(minutes=age),
    )


# ─── validate_draft ──────────────────────────────────────────────

@pytest.mark.parametrize("name", ["", " ", "\t\n", "   　"])
def test_validate_draft_rejects_blank_name(name):
    with pytest.raises(ContactValidationError) as exc_info:
        validate_draft(ContactDraft(name=name))
    assert exc_info.value.field == "name"
    assert exc_info.value.http_status == 400


def test_validate_draft_accepts_padded_name():
    validate_draft(ContactDraft(name="  Bob  "))


# ─── normalize_draft ─────────────────────────────────────────────

def test_normalize_trims_every_field():
    fields = normalize_draft(ContactDraft(
        name="  Alice ", email=" a@x.io ", phone=" 555 ",
        company=" Acme ", notes="  met at conf  ",
    ))
    assert fields == ContactFields(
        name="Alice", email="a@x.io", phone="555",
        company="Acme", notes="met at conf",
    )


def test_normalize_converts_blank_optionals_to_none():
    fields = normalize_draft(ContactDraft(
        name="Bob", email="", phone="   ", company="\n", notes=None,
    ))
    assert fields.email is None
    assert fields.phone is None
    assert fields.company is None
    assert fields.notes is None


def test_normalize_never_stores_empty_string():
    fields = normalize_draft(ContactDraft(name="Bob", email="", notes=" "))
    assert "" not in fields.as_dict().values()


def test_normalize_does_not_truncate():
    long_notes = "x" * 900
    fields = normalize_draft(ContactDraft(name="Bob", notes=long_notes))
    assert fields.notes == long_notes


@pytest.mark.parametrize("draft", [
    ContactDraft(name=" Bob ", email=" ", phone="", company=" Acme", notes=None),
    ContactDraft(name="Alice", email="A@X.io  ", phone=" (11) 9999-0000 "),
    ContactDraft(name="   Carol", notes="\tline one\nline two  "),
])
def test_normalize_is_idempotent(draft):
    once = normalize_draft(draft)
    twice = normalize_draft(ContactDraft(**once.as_dict()))
    assert once == twice


# ─── filter_contacts ─────────────────────────────────────────────

def test_empty_query_returns_all_in_order():
    contacts = [_contact("Zed", age=0), _contact("Amy", age=1), _contact("Bob", age=2)]
    assert filter_contacts(contacts, "") == contacts


def test_none_query_returns_all_in_order():
    contacts = [_contact("Zed"), _contact("Amy")]
    assert filter_contacts(contacts, None) == contacts


def test_name_match_is_case_insensitive():
    alice = _contact("Alice")
    assert filter_contacts([alice, _contact("Bob")], "ali") == [alice]
    assert filter_contacts([alice], "ALI") == [alice]


def test_email_and_company_match_case_insensitive():
    by_email = _contact("X", email="Someone@Example.com")
    by_company = _contact("Y", company="Initech")
    contacts = [by_email, by_company, _contact("Z")]
    assert filter_contacts(contacts, "example") == [by_email]
    assert filter_contacts(contacts, "INITECH") == [by_company]


def test_phone_matches_raw_characters():
    contact = _contact("P", phone="(11) 99999-0000")
    assert filter_contacts([contact], "99999") == [contact]
    assert filter_contacts([contact], "(11)") == [contact]
    assert filter_contacts([contact], "11999") == []


def test_absent_fields_never_match_and_never_raise():
    bare = _contact("Bob")
    assert filter_contacts([bare], "example.com") == []
    assert contact_matches(bare, "bob") is True


def test_notes_are_not_searched():
    contact = _contact("Bob", notes="golf partner")
    assert filter_contacts([contact], "golf") == []


def test_filter_preserves_input_order_of_matches():
    first = _contact("Ann Lee", age=0)
    second = _contact("Lee Ann", age=5)
    third = _contact("Leo", company="Annex", age=9)
    assert filter_contacts([first, _contact("Bob"), second, third], "ann") == [
        first, second, third,
    ]
