"""FieldScan — the per-field accumulator threaded through the field pass."""

from __future__ import annotations

from dataclasses import dataclass, field

from gormlint.domain.tags import TagEntry


@dataclass
class FieldScan:
    """Keys seen so far in one field's tag, first occurrence wins.

    Created fresh for every field and discarded once the field is done.
    """

    seen: dict[str, TagEntry] = field(default_factory=dict)

    def observe(self, entry: TagEntry) -> bool:
        """Record *entry*; return False if its key was already seen."""
        if entry.lowered in self.seen:
            return False
        self.seen[entry.lowered] = entry
        return True

    def has(self, *keys: str) -> bool:
        """True if every key in *keys* (lowercase) has been seen."""
        return all(k in self.seen for k in keys)

    def present(self, keys: tuple[str, ...]) -> list[str]:
        """Subset of *keys* that have been seen, in the order given."""
        return [k for k in keys if k in self.seen]

    def token(self, key: str) -> str:
        """Key token as first written, for messages and highlighting."""
        entry = self.seen.get(key)
        return entry.token if entry is not None else key

    def tokens(self) -> list[str]:
        return [e.token for e in self.seen.values()]
