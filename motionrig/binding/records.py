"""
Binding records: which controller drives which consumer slot. Stored with the
composition; formula text on the layer is generated from these.
"""
from dataclasses import asdict, dataclass
from typing import Any, Iterator

SLOTS = ("position", "scale")


@dataclass(frozen=True)
class Binding:
    consumer_id: int
    controller_name: str
    slot: str                 # position | scale
    kind: str                 # controller kind that produced the formula
    time_offset: float = 0.0  # seconds, y_driven only

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class BindingTable:
    """At most one binding per (consumer, slot); adding replaces the previous one."""

    def __init__(self, bindings: list[Binding] | None = None):
        self._by_key: dict[tuple[int, str], Binding] = {}
        for b in bindings or []:
            self.put(b)

    def put(self, binding: Binding) -> Binding | None:
        """Store binding; returns the one it replaced, if any."""
        key = (binding.consumer_id, binding.slot)
        previous = self._by_key.get(key)
        self._by_key[key] = binding
        return previous

    def get(self, consumer_id: int, slot: str) -> Binding | None:
        return self._by_key.get((consumer_id, slot))

    def remove(self, consumer_id: int, slot: str | None = None) -> list[Binding]:
        """Drop one slot's binding, or all of a consumer's bindings when slot is None."""
        keys = [k for k in self._by_key if k[0] == consumer_id and (slot is None or k[1] == slot)]
        return [self._by_key.pop(k) for k in keys]

    def for_controller(self, controller_name: str, slot: str | None = None) -> list[Binding]:
        return [
            b for b in self._by_key.values()
            if b.controller_name == controller_name and (slot is None or b.slot == slot)
        ]

    def for_consumer(self, consumer_id: int) -> list[Binding]:
        return [b for b in self._by_key.values() if b.consumer_id == consumer_id]

    def consumer_ids(self) -> set[int]:
        return {k[0] for k in self._by_key}

    def __iter__(self) -> Iterator[Binding]:
        return iter(list(self._by_key.values()))

    def __len__(self) -> int:
        return len(self._by_key)

    def to_list(self) -> list[dict[str, Any]]:
        return [b.to_dict() for b in self._by_key.values()]

    @classmethod
    def from_list(cls, items: list[dict[str, Any]]) -> "BindingTable":
        return cls([Binding(**item) for item in items])
