"""Property references: ``Owner::name`` identifiers for rule keys.

A reference names a property by its owning type and its name. References
are immutable and compare structurally, so they can key the rule registry.

The owner ``*`` is a wildcard; on the source side of a rule it removes the
source-type constraint.
"""

from __future__ import annotations

from dataclasses import dataclass

from objmap.domain.errors import MalformedReferenceError

SEPARATOR = "::"
ANY_OWNER = "*"


@dataclass(frozen=True)
class PropertyReference:
    """A property identified by owning type and name."""

    owner: str
    name: str

    def __post_init__(self) -> None:
        if not self.owner:
            raise MalformedReferenceError(f"{self.owner}{SEPARATOR}{self.name}", "empty owner")
        if not self.name:
            raise MalformedReferenceError(f"{self.owner}{SEPARATOR}{self.name}", "empty name")
        if SEPARATOR in self.name:
            raise MalformedReferenceError(
                f"{self.owner}{SEPARATOR}{self.name}", "separator inside property name"
            )

    @classmethod
    def parse(cls, raw: str) -> PropertyReference:
        """Build a reference from ``"Owner::name"``.

        The owner may be dotted (``"app.views.Order::total"``). The first
        ``::`` separates owner from name; a second one is malformed.

        Examples:
            >>> PropertyReference.parse("Dest::full_name")
            PropertyReference(owner='Dest', name='full_name')

        Raises:
            MalformedReferenceError: If the separator is absent or repeated,
                or either side is empty.
        """
        if not isinstance(raw, str):
            raise MalformedReferenceError(repr(raw), "expected a string")
        owner, sep, name = raw.partition(SEPARATOR)
        if not sep:
            raise MalformedReferenceError(raw, f"missing {SEPARATOR!r} separator")
        if not owner.strip():
            raise MalformedReferenceError(raw, "empty owner")
        if not name.strip():
            raise MalformedReferenceError(raw, "empty name")
        return cls(owner=owner.strip(), name=name.strip())

    @classmethod
    def coerce(cls, value: PropertyReference | str) -> PropertyReference:
        """Accept either a reference or its ``"Owner::name"`` string form."""
        if isinstance(value, PropertyReference):
            return value
        return cls.parse(value)

    @property
    def is_wildcard(self) -> bool:
        return self.owner == ANY_OWNER

    def __str__(self) -> str:
        return f"{self.owner}{SEPARATOR}{self.name}"
