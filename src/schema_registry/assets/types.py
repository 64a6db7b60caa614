"""
Asset schema data types.

An AssetSchema is a named composite of attribute types. Every membership
change is appended to its change history and bumps its version:

    v1 {color}  --ADD weight-->  v2 {color, weight}  --DELETE color-->  v3 {weight}

Only the deltas are stored. Older versions are rebuilt by undoing entries
from the tail of the log, see AssetSchema.attributes_at_version().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..attributes.types import AttributeRef
from ..errors import AttributeNotFoundError, InvalidArgumentError, InvalidVersionError


class ChangeKind(str, Enum):
    """Kind of membership change."""
    ADD = "add"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class ChangeEntry:
    """One membership change of an asset schema."""

    kind: ChangeKind
    attribute: AttributeRef


@dataclass(slots=True)
class AssetSchema:
    """
    A named, versioned set of attribute types.

    Invariant: version == len(change_history) + 1. Membership is keyed by
    attribute name (case-insensitive) plus attribute version, so two
    versions of the same attribute type may be members at once.
    """

    name: str
    attributes: list[AttributeRef] = field(default_factory=list)
    version: int = 1
    change_history: list[ChangeEntry] = field(default_factory=list)

    def _find(self, ref: AttributeRef) -> int | None:
        for i, member in enumerate(self.attributes):
            if member.matches(ref):
                return i
        return None

    def add_attribute(self, ref: AttributeRef | None) -> bool:
        """
        Add an attribute to the membership.

        Adding a member that is already present at the same version is a
        no-op and does not bump the version.

        Args:
            ref: Snapshot of the attribute type to add

        Returns:
            True if the membership changed

        Raises:
            InvalidArgumentError: If ref is None
        """
        if ref is None:
            raise InvalidArgumentError(f"Cannot add a missing attribute to asset '{self.name}'")
        if self._find(ref) is not None:
            return False
        self.attributes.append(ref)
        self.change_history.append(ChangeEntry(ChangeKind.ADD, ref))
        self.version += 1
        return True

    def remove_attribute(self, ref: AttributeRef | None) -> None:
        """
        Remove an attribute from the membership.

        Args:
            ref: Snapshot of the member to remove (matched by name and version)

        Raises:
            InvalidArgumentError: If ref is None
            AttributeNotFoundError: If no member matches
        """
        if ref is None:
            raise InvalidArgumentError(f"Cannot remove a missing attribute from asset '{self.name}'")
        index = self._find(ref)
        if index is None:
            raise AttributeNotFoundError(
                f"Attribute '{ref.name}' v{ref.version} is not a member of asset '{self.name}'"
            )
        del self.attributes[index]
        self.change_history.append(ChangeEntry(ChangeKind.DELETE, ref))
        self.version += 1

    def has_attribute(self, name: str) -> bool:
        """Check if any version of the named attribute is a member."""
        folded = name.casefold()
        return any(member.name.casefold() == folded for member in self.attributes)

    def members_named(self, name: str) -> list[AttributeRef]:
        """Get the current members with the given name, lowest version first."""
        folded = name.casefold()
        return sorted(
            (m for m in self.attributes if m.name.casefold() == folded),
            key=lambda m: m.version,
        )

    def attributes_at_version(self, version: int) -> list[AttributeRef]:
        """
        Rebuild the membership as it was at a given version.

        Starts from the live membership and undoes the newest
        (current version - version) change entries on a copy: an ADD is
        undone by removing the attribute, a DELETE by re-inserting it.

        Args:
            version: Version number, 1 to the current version

        Returns:
            The members at that version

        Raises:
            InvalidVersionError: If version is out of range
        """
        if isinstance(version, bool) or not isinstance(version, int) or not 1 <= version <= self.version:
            raise InvalidVersionError(
                f"Asset '{self.name}' has no version {version} (current: {self.version})",
                version=version,
                current_version=self.version,
            )
        members = list(self.attributes)
        if version == self.version:
            return members

        undo_count = self.version - version
        for entry in reversed(self.change_history[-undo_count:]):
            if entry.kind is ChangeKind.ADD:
                members = [m for m in members if not m.matches(entry.attribute)]
            else:
                members.append(entry.attribute)
        return members

    def initial_attributes(self) -> list[AttributeRef]:
        """Get the membership the asset was registered with."""
        return self.attributes_at_version(1)

    def changes_since(self, version: int) -> list[ChangeEntry]:
        """
        Get the change entries applied after a given version.

        Raises:
            InvalidVersionError: If version is out of range
        """
        if isinstance(version, bool) or not isinstance(version, int) or not 1 <= version <= self.version:
            raise InvalidVersionError(
                f"Asset '{self.name}' has no version {version} (current: {self.version})",
                version=version,
                current_version=self.version,
            )
        return list(self.change_history[version - 1:])
