"""Ordering of ``vMAJOR.MINOR.PATCH`` release identifiers."""


def parse_version(version: str) -> tuple[int, int, int]:
    """Parse ``v1.2.3`` (or ``1.2.3``) into an integer triple.

    Raises:
        ValueError: If there are fewer than three numeric components
    """
    parts = version.removeprefix("v").split(".")
    if len(parts) < 3:
        raise ValueError(f"not a vMAJOR.MINOR.PATCH version: {version!r}")
    major, minor, patch = (int(p) for p in parts[:3])
    return major, minor, patch


def precedes(first: str, second: str) -> bool:
    """Return True if release ``first`` came out before release ``second``.

    Unparseable input on either side yields False, so an unknown version
    never switches on behaviour reserved for old releases.
    """
    try:
        return parse_version(first) < parse_version(second)
    except ValueError:
        return False
