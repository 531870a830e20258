"""In-memory best runs."""

from dataclasses import dataclass, asdict

from .constants import MAX_RECORDS


@dataclass(frozen=True)
class Record:
    level: int
    apples: int
    elapsed_ms: float
    won: bool = False

    def sort_key(self):
        return (not self.won, -self.level, -self.apples, self.elapsed_ms)


class RecordBook:
    def __init__(self, limit: int = MAX_RECORDS):
        self.limit = limit
        self.entries: list[Record] = []

    def add(self, record: Record) -> int:
        """Insert ``record`` and return its 1-based rank, or 0 if it did not make the list."""
        self.entries.append(record)
        self.entries.sort(key=Record.sort_key)
        del self.entries[self.limit:]
        for rank, entry in enumerate(self.entries, start=1):
            if entry is record:
                return rank
        return 0

    def best(self):
        return self.entries[0] if self.entries else None

    def to_list(self) -> list[dict]:
        return [asdict(r) for r in self.entries]
