"""Per-category element identifier collection across systems.

`IdentifierCollector` keeps one insertion-ordered set per SystemCategory.
An id is recorded once per category no matter how many trees or revisit
leaves reference it. Writes take a lock, so one collector can be shared by
concurrent system pipelines; alternatively each pipeline fills its own and
the results are merged.
"""

from __future__ import annotations

import json
import threading
from typing import Any, Dict, Iterable, List

from mepgraph.model.elements import SystemCategory
from mepgraph.traversal.tree import TraversalTree

# Fixed ids of the synthetic nodes in the combined document
COMBINED_ROOT_ID = 1
CATEGORY_NODE_IDS = {
    SystemCategory.MECHANICAL: 2,
    SystemCategory.ELECTRICAL: 3,
    SystemCategory.PIPING: 4,
}


class IdentifierCollector:
    """Deduplicated element ids bucketed by system category."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._buckets: Dict[SystemCategory, Dict[int, None]] = {
            category: {} for category in SystemCategory
        }

    def add(self, category: SystemCategory, element_id: int) -> bool:
        """Record one id. Returns True if it was not recorded before."""
        with self._lock:
            bucket = self._buckets[category]
            if element_id in bucket:
                return False
            bucket[element_id] = None
            return True

    def add_many(self, category: SystemCategory, element_ids: Iterable[int]) -> int:
        """Record ids in order; returns how many were new."""
        with self._lock:
            bucket = self._buckets[category]
            before = len(bucket)
            for element_id in element_ids:
                bucket.setdefault(element_id, None)
            return len(bucket) - before

    def collect(self, tree: TraversalTree) -> int:
        """Record every element of a tree under the tree's system category.

        Revisit leaves are included. Returns how many ids were new.
        """
        return self.add_many(tree.system.category, tree.element_ids())

    def merge(self, other: IdentifierCollector) -> None:
        """Union another collector into this one, keeping first-seen order."""
        for category in SystemCategory:
            self.add_many(category, other.ids(category))

    def ids(self, category: SystemCategory) -> List[int]:
        with self._lock:
            return list(self._buckets[category])

    def reset(self) -> None:
        with self._lock:
            for bucket in self._buckets.values():
                bucket.clear()

    def to_json_array(self, category: SystemCategory) -> str:
        """Return the ids of one category as a JSON array literal."""
        return json.dumps(self.ids(category), separators=(",", ":"))

    def combined_document(self, root_name: str = "MEP Systems") -> Dict[str, Any]:
        """Return the three-branch document of all collected ids."""
        return {
            "id": COMBINED_ROOT_ID,
            "name": root_name,
            "children": [
                {
                    "id": CATEGORY_NODE_IDS[category],
                    "name": category.label,
                    "children": self.ids(category),
                }
                for category in SystemCategory
            ],
        }

    def __len__(self) -> int:
        with self._lock:
            return sum(len(bucket) for bucket in self._buckets.values())
