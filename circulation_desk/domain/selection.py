"""Selection tracking for bulk actions over a visible list"""

from typing import AbstractSet, FrozenSet, Iterable, Sequence


class SelectionCoordinator:
    """
    Tracks a set of selected entity ids independent of the list contents.

    Every change replaces the selection with a new frozenset; a set returned
    earlier is never mutated. Consumers prune ids that leave the list.
    """

    def __init__(self, selected: Iterable[str] = ()):
        self._selected: FrozenSet[str] = frozenset(selected)

    @property
    def selected(self) -> FrozenSet[str]:
        return self._selected

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._selected

    def toggle(self, entity_id: str) -> FrozenSet[str]:
        """Flip membership of one id"""
        if entity_id in self._selected:
            self._selected = self._selected - {entity_id}
        else:
            self._selected = self._selected | {entity_id}
        return self._selected

    def select_all(self, candidate_ids: Sequence[str]) -> FrozenSet[str]:
        self._selected = frozenset(candidate_ids)
        return self._selected

    def clear(self) -> FrozenSet[str]:
        self._selected = frozenset()
        return self._selected

    def discard(self, entity_id: str) -> FrozenSet[str]:
        """Drop one id, e.g. after the entity was deleted"""
        if entity_id in self._selected:
            self._selected = self._selected - {entity_id}
        return self._selected

    def prune(self, candidate_ids: AbstractSet[str] | Sequence[str]) -> FrozenSet[str]:
        """Keep only ids that are still valid candidates"""
        remaining = self._selected & frozenset(candidate_ids)
        if remaining != self._selected:
            self._selected = remaining
        return self._selected

    def is_fully_selected(self, candidate_ids: Sequence[str]) -> bool:
        return len(self._selected) == len(candidate_ids) and len(candidate_ids) > 0
