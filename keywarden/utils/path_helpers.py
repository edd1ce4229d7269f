def path_matches(path: str, allowed_paths: set[str]) -> bool:
    """Check if path matches any allowed path, handling trailing slashes.

    Returns True if:
    - path exactly matches an allowed path, OR
    - path with trailing slash added/removed matches an allowed path
    """
    if path in allowed_paths:
        return True

    if not path.endswith("/"):
        if path + "/" in allowed_paths:
            return True

    if path.endswith("/") and path != "/":
        if path[:-1] in allowed_paths:
            return True

    return False


def path_has_prefix(path: str, prefixes: tuple[str, ...]) -> bool:
    """Check if path equals a prefix or lives below it (segment aware).

    ``/keys`` matches ``/keys`` and ``/keys/abc`` but not ``/keysets``.
    """
    for prefix in prefixes:
        base = prefix.rstrip("/")
        if path == base or path.startswith(base + "/"):
            return True
    return False
