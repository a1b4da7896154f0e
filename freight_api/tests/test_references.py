import uuid

import pytest

from src.core.errors import InvalidReference
from src.storage.references import is_canonical, parse_storage_reference, try_parse_storage_reference

from .conftest import REF


@pytest.mark.parametrize("ref", [REF, str(uuid.uuid4()), "00000000-0000-0000-0000-000000000000"])
def test_canonical_is_idempotent(ref):
    assert parse_storage_reference(ref) == ref
    assert parse_storage_reference(parse_storage_reference(ref)) == ref


def test_token_query_parameter():
    url = f"https://store/x?token={REF}&exp=1"
    assert parse_storage_reference(url) == REF


def test_token_query_parameter_last():
    assert parse_storage_reference(f"https://store/api/upload?exp=1&token={REF}") == REF


def test_token_fragment_without_url():
    assert parse_storage_reference(f"token={REF}") == REF


def test_similarly_named_parameter_is_not_a_token():
    # mytoken= is not the token parameter; the final path segment wins instead
    url = f"https://store/objects/{REF}?mytoken=deadbeef"
    assert parse_storage_reference(url) == REF


def test_final_path_segment_with_query_suffix():
    assert parse_storage_reference(f"https://store/api/storage/{REF}?sig=abc") == REF


def test_relative_path():
    assert parse_storage_reference(f"bucket/receipts/{REF}") == REF


def test_bare_hex_with_trailing_noise():
    raw = "a1b2c3d4e5f60718293a4b5c6d7e8f90extra"
    assert parse_storage_reference(raw) == "a1b2c3d4-e5f6-0718-293a-4b5c6d7e8f90"


def test_bare_hex_in_path():
    raw = "https://store/objects/" + REF.replace("-", "")
    assert parse_storage_reference(raw) == REF


def test_uppercase_canonical_is_returned_unchanged():
    upper = "AB12AB12-0000-4FFF-8FFF-ABCDEFABCDEF"
    assert parse_storage_reference(upper) == upper
    assert parse_storage_reference(f"https://store/x?token={upper}") == upper


def test_bare_hex_keeps_case():
    assert parse_storage_reference(REF.replace("-", "").upper()) == REF.upper()
    assert parse_storage_reference("AbCd" + "0" * 28) == "AbCd0000-0000-0000-0000-000000000000"


def test_surrounding_whitespace_is_ignored():
    assert parse_storage_reference(f"  {REF}\n") == REF


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "   ",
        "abc123",
        "a1b2c3d4e5f60718293a4b5c6d7e8f9",  # 31 chars
        "zzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzz",
        "ab12ab12-0000-4fff-8fff-abcdefabcdeg",
        "https://store/objects/not-a-reference",
        "https://store/x?token=&exp=1",
        f"https://store/objects/{REF}/",
    ],
)
def test_rejects_malformed(raw):
    with pytest.raises(InvalidReference) as excinfo:
        parse_storage_reference(raw)
    assert excinfo.value.raw == raw


@pytest.mark.parametrize("raw", [None, 42, b"ab12ab12-0000-4fff-8fff-abcdefabcdef"])
def test_rejects_non_strings(raw):
    with pytest.raises(InvalidReference):
        parse_storage_reference(raw)


def test_invalid_reference_echoes_raw_value():
    with pytest.raises(InvalidReference, match="garbage"):
        parse_storage_reference("garbage")


def test_try_parse():
    assert try_parse_storage_reference(REF) == REF
    assert try_parse_storage_reference("nope") is None


def test_is_canonical():
    assert is_canonical(REF)
    assert is_canonical(REF.upper())
    assert not is_canonical(REF.replace("-", ""))
    assert not is_canonical(None)
