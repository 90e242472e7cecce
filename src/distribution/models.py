"""Distribution list data model."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple

MAX_ADDRESS_LENGTH = 254


def _text(value) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class Role(str, Enum):
    """Recipient role within an outgoing email."""
    TO = "TO"
    CC = "CC"
    BCC = "BCC"

    @classmethod
    def parse(cls, token: Optional[str]) -> Optional["Role"]:
        """Match a role token case-insensitively, returning None when unrecognized."""
        if token is None:
            return None
        try:
            return cls(token.strip().upper())
        except ValueError:
            return None


@dataclass(frozen=True)
class DistributionEntry:
    """A single (role, address) row of a distribution list."""
    role: str
    address: str

    def __post_init__(self):
        # Keep the raw token so that unknown roles survive loading
        object.__setattr__(self, "role", _text(self.role).strip().upper())
        object.__setattr__(self, "address", _text(self.address).strip())
        if not self.address:
            raise ValueError("Distribution entry address must not be empty")
        if len(self.address) > MAX_ADDRESS_LENGTH:
            raise ValueError(
                f"Distribution entry address exceeds {MAX_ADDRESS_LENGTH} characters"
            )

    @property
    def recipient_role(self) -> Optional[Role]:
        return Role.parse(self.role)

    @property
    def is_recognized(self) -> bool:
        return self.recipient_role is not None


@dataclass(frozen=True)
class DistributionList:
    """
    Ordered, read-only sequence of distribution entries.

    Source order is preserved and duplicate addresses are allowed, both
    within a role and across roles.
    """
    entries: Tuple[DistributionEntry, ...] = field(default_factory=tuple)
    source: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "entries", tuple(self.entries))

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[Tuple[str, str]],
        source: Optional[str] = None,
    ) -> "DistributionList":
        """Build a list from (role, address) pairs."""
        return cls(
            entries=tuple(DistributionEntry(role=role, address=address) for role, address in pairs),
            source=source,
        )

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[DistributionEntry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> DistributionEntry:
        return self.entries[index]

    def __bool__(self) -> bool:
        return bool(self.entries)

    def addresses_for(self, role: Role) -> List[str]:
        """Addresses assigned to ``role``, in source order."""
        return [entry.address for entry in self.entries if entry.recipient_role is role]

    @property
    def unrecognized(self) -> List[DistributionEntry]:
        """Entries whose role is not TO, CC or BCC."""
        return [entry for entry in self.entries if not entry.is_recognized]
