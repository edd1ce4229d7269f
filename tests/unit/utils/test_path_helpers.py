from keywarden.utils.path_helpers import path_has_prefix, path_matches
from keywarden.utils.validators import is_blank, parse_uuid


def test_path_matches_handles_trailing_slash():
    allowed = {"/health", "/"}

    assert path_matches("/health", allowed)
    assert path_matches("/health/", allowed)
    assert path_matches("/", allowed)
    assert not path_matches("/healthz", allowed)


def test_path_has_prefix_is_segment_aware():
    prefixes = ("/keys", "/reach")

    assert path_has_prefix("/keys", prefixes)
    assert path_has_prefix("/keys/abc/pause", prefixes)
    assert path_has_prefix("/reach/validate", prefixes)
    assert not path_has_prefix("/keysets", prefixes)
    assert not path_has_prefix("/data/keys/x", prefixes)


def test_is_blank():
    assert is_blank(None)
    assert is_blank("")
    assert is_blank("   ")
    assert not is_blank("alice")


def test_parse_uuid_rejects_malformed_ids():
    assert parse_uuid("not-a-uuid") is None
    assert parse_uuid("") is None
    assert parse_uuid(None) is None
    assert parse_uuid(42) is None
    parsed = parse_uuid("0b9a1c1e-8f39-4bb4-8e49-2f5f9f5d1c11")
    assert str(parsed) == "0b9a1c1e-8f39-4bb4-8e49-2f5f9f5d1c11"


def test_parse_uuid_requires_canonical_form():
    canonical = "0b9a1c1e-8f39-4bb4-8e49-2f5f9f5d1c11"

    assert parse_uuid(canonical.upper()) is not None
    assert parse_uuid(canonical.replace("-", "")) is None
    assert parse_uuid(f" {canonical} ") is None
    assert parse_uuid(f"{canonical}\n") is None
    assert parse_uuid("0b9a-1c1e8f394bb48e492f5f9f5d1c11") is None
    assert parse_uuid(f"urn:uuid:{canonical}") is None
