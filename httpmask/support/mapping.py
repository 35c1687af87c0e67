"""Name-keyed obfuscator registry with per-entry case sensitivity."""

from enum import Enum
from typing import Dict, Iterator, NamedTuple, Optional, Sequence, Tuple

from httpmask.errors import DuplicateKeyError, require_not_none


class CaseSensitivity(Enum):
    """How a registered name is compared to looked-up names."""
    CASE_SENSITIVE = "case_sensitive"
    CASE_INSENSITIVE = "case_insensitive"

    def key(self, name: str) -> str:
        """Lookup key for name under this comparison."""
        if self is CaseSensitivity.CASE_INSENSITIVE:
            return fold_case(name)
        return name


def _fold_char(c: str) -> str:
    upper = c.upper()
    if len(upper) == 1:
        c = upper
    lower = c.lower()
    return lower if len(lower) == 1 else c


def fold_case(name: str) -> str:
    """
    Case-insensitive lookup key for name.

    Characters are folded one at a time and never change the length of the
    name, so "straße" and "STRASSE" stay different names.
    """
    return "".join(_fold_char(c) for c in name)


class Entry(NamedTuple):
    name: str
    obfuscator: object
    case_sensitivity: CaseSensitivity


class ObfuscatorMap:
    """
    Immutable mapping from names to obfuscators.

    Every entry keeps the case sensitivity it was registered with. A
    case-sensitive and a case-insensitive entry may share a name; lookups
    try the case-sensitive entries first.
    """

    __slots__ = ("_entries", "_case_sensitive", "_case_insensitive")

    def __init__(self, entries: Sequence[Entry] = ()):
        self._entries: Tuple[Entry, ...] = tuple(entries)
        self._case_sensitive: Dict[str, object] = {}
        self._case_insensitive: Dict[str, object] = {}
        for entry in self._entries:
            target = (
                self._case_sensitive
                if entry.case_sensitivity is CaseSensitivity.CASE_SENSITIVE
                else self._case_insensitive
            )
            target[entry.case_sensitivity.key(entry.name)] = entry.obfuscator

    def get(self, name: str, default: Optional[object] = None) -> Optional[object]:
        """
        Get the obfuscator registered for name.

        Args:
            name: Name to look up
            default: Value returned when no entry matches

        Returns:
            Matching obfuscator, or default
        """
        require_not_none(name, "name")
        obfuscator = self._case_sensitive.get(name)
        if obfuscator is None:
            obfuscator = self._case_insensitive.get(fold_case(name), default)
        return obfuscator

    def __getitem__(self, name: str) -> object:
        obfuscator = self.get(name)
        if obfuscator is None:
            raise KeyError(name)
        return obfuscator

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def entries(self) -> Tuple[Entry, ...]:
        """All entries in insertion order."""
        return self._entries

    def __eq__(self, other) -> bool:
        if not isinstance(other, ObfuscatorMap):
            return NotImplemented
        return set(self._entries) == set(other._entries)

    def __hash__(self) -> int:
        return hash(frozenset(self._entries))

    def __repr__(self) -> str:
        items = ", ".join(
            f"{e.name!r}: {e.obfuscator!r}"
            + ("" if e.case_sensitivity is CaseSensitivity.CASE_SENSITIVE else " (case insensitive)")
            for e in self._entries
        )
        return "{" + items + "}"


class MapBuilder:
    """
    Collects entries for an ObfuscatorMap.

    The default case sensitivity applies to entries added after it is set;
    entries keep the sensitivity that was in effect when they were added.
    """

    def __init__(self):
        self._entries = []
        self._keys = {
            CaseSensitivity.CASE_SENSITIVE: set(),
            CaseSensitivity.CASE_INSENSITIVE: set(),
        }
        self._default = CaseSensitivity.CASE_SENSITIVE

    @property
    def default_case_sensitivity(self) -> CaseSensitivity:
        return self._default

    def case_sensitive_by_default(self) -> "MapBuilder":
        self._default = CaseSensitivity.CASE_SENSITIVE
        return self

    def case_insensitive_by_default(self) -> "MapBuilder":
        self._default = CaseSensitivity.CASE_INSENSITIVE
        return self

    def with_entry(
        self,
        name: str,
        obfuscator: object,
        case_sensitivity: Optional[CaseSensitivity] = None
    ) -> "MapBuilder":
        """
        Add an entry.

        Args:
            name: Entry name
            obfuscator: Obfuscator for the entry
            case_sensitivity: Comparison for this entry (default: the builder's
                current default)

        Returns:
            This builder

        Raises:
            NullArgumentError: If name or obfuscator is None
            DuplicateKeyError: If an entry with the same name and the same
                case sensitivity was already added
        """
        require_not_none(name, "name")
        require_not_none(obfuscator, "obfuscator")
        sensitivity = case_sensitivity or self._default
        key = sensitivity.key(name)
        keys = self._keys[sensitivity]
        if key in keys:
            raise DuplicateKeyError(f"Duplicate key: {name} ({sensitivity.value})")
        keys.add(key)
        self._entries.append(Entry(name, obfuscator, sensitivity))
        return self

    def build(self) -> ObfuscatorMap:
        return ObfuscatorMap(self._entries)
