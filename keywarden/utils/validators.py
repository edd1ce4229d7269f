import re
from uuid import UUID

# Canonical 8-4-4-4-12 form, the only one accepted in paths and bodies
_UUID_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


def is_blank(value: str | None) -> bool:
    """True for None, empty or whitespace-only input."""
    return value is None or not str(value).strip()


def parse_uuid(value: UUID | str | None) -> UUID | None:
    """Parse an id from a path or body; anything non-canonical gives None."""
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str) or not _UUID_PATTERN.fullmatch(value):
        return None
    return UUID(value)
