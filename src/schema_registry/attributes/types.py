"""
Attribute type data types.

An AttributeType is a named, versioned data-type declaration, e.g.
"color": "string". Changing its data type bumps the version and keeps the
previous tag in the history, so the tag active at any past version can be
recovered:

    version 1        version 2        version 3
    "string"   →     "int"      →     "float"      (data_type)
    history: []      ["string"]       ["string", "int"]
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors import InvalidArgumentError, InvalidVersionError


@dataclass(frozen=True, slots=True)
class AttributeRef:
    """
    Immutable snapshot of an attribute type at one version.

    Asset schemas hold these instead of the live AttributeType, so updating
    a type in the registry never rewrites a recorded membership.
    """

    name: str
    version: int
    data_type: str

    @property
    def key(self) -> tuple[str, int]:
        """Identity used for membership: case-folded name plus version."""
        return (self.name.casefold(), self.version)

    def matches(self, other: AttributeRef) -> bool:
        """Check if both refer to the same attribute type at the same version."""
        return self.key == other.key


@dataclass(slots=True)
class AttributeType:
    """A named attribute type with its data-type change history."""

    name: str
    data_type: str
    data_type_history: list[str] = field(default_factory=list)
    version: int = 1

    def set_data_type(self, data_type: str) -> None:
        """
        Change the data type.

        The old tag is appended to the history and the version is bumped,
        even when the new tag equals the current one.

        Args:
            data_type: The new data type tag

        Raises:
            InvalidArgumentError: If data_type is empty
        """
        if not data_type:
            raise InvalidArgumentError(f"Attribute '{self.name}' needs a data type")
        self.data_type_history.append(self.data_type)
        self.data_type = data_type
        self.version += 1

    def data_type_at(self, version: int) -> str:
        """
        Get the data type that was active at a given version.

        Args:
            version: Version number, 1 to the current version

        Returns:
            The data type tag

        Raises:
            InvalidVersionError: If version is out of range
        """
        if isinstance(version, bool) or not isinstance(version, int) or not 1 <= version <= self.version:
            raise InvalidVersionError(
                f"Attribute '{self.name}' has no version {version} (current: {self.version})",
                version=version,
                current_version=self.version,
            )
        if version == self.version:
            return self.data_type
        return self.data_type_history[version - 1]

    def ref(self) -> AttributeRef:
        """Snapshot the current version."""
        return AttributeRef(name=self.name, version=self.version, data_type=self.data_type)
