"""
Monzo resource identifiers.

Every Monzo id is a string of the form ``<prefix>_<opaque suffix>``, e.g.
``acc_00009237aqC8c5umZmrRdh`` or ``tx_00008zIcpb1TB4yeIFXMzx``. The prefix
tells you what kind of resource the id points at. Nothing beyond the prefix
is checked: no length, checksum or uniqueness guarantees are made.
"""

from typing import NewType

from .errors import InvalidIdError

Id = NewType("Id", str)

# Order matters only for id_prefix(): the first match wins.
ID_PREFIXES: tuple[str, ...] = (
    "acc",
    "pot",
    "user",
    "oauth2client",
    "tx",
    "grp",
    "merch",
    "business",
    "entryset",
    "obextpayment",
    "potdep",
    "anonuser",
    "mcauthmsg",
    "mclifecycle",
    "mccard",
    "attach",
    "tab",
    "participant",
    "webhook",
    "receipt",
)


def validate_id(value: str, prefix: str | None = None) -> bool:
    """
    Check whether a string looks like a Monzo id.

    Args:
        value: Candidate id
        prefix: Required prefix (without the trailing underscore). When
            omitted, any known prefix is accepted.

    Returns:
        True if the id starts with ``<prefix>_``
    """
    if not isinstance(value, str):
        return False
    if prefix:
        return value.startswith(f"{prefix}_")
    return any(value.startswith(f"{p}_") for p in ID_PREFIXES)


def assert_id(value: str, prefix: str | None = None) -> None:
    """Raise InvalidIdError unless validate_id() accepts the value."""
    if not validate_id(value, prefix):
        raise InvalidIdError(value, prefix)


def cast_id(value: str, prefix: str | None = None) -> Id:
    """Return the value typed as an Id, or raise InvalidIdError."""
    assert_id(value, prefix)
    return Id(value)


def id_prefix(value: str) -> str | None:
    """Return the known prefix of an id, or None."""
    for p in ID_PREFIXES:
        if value.startswith(f"{p}_"):
            return p
    return None
