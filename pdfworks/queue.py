#!/usr/bin/env python3
"""Ordered, deduplicated queue of PDFs awaiting a merge.

The queue is an immutable value. Every mutation returns a new queue with
positions renumbered densely from 0, so a pipeline holding a snapshot is
never affected by later user actions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from pdfworks.errors import IndexOutOfBounds, InvalidPermutation
from pdfworks.types import PDF_CONTENT_TYPE, QueueEntry, RawFile

logger = logging.getLogger(__name__)

MIN_MERGE_INPUTS = 2


def _renumber(files: Iterable[RawFile]) -> Tuple[QueueEntry, ...]:
    return tuple(
        QueueEntry(file=f, display_name=f.name, position=i) for i, f in enumerate(files)
    )


@dataclass(frozen=True)
class DocumentQueue:
    """Merge inputs in user-chosen order.

    Display names are unique within a queue; they are the dedup key.
    """

    entries: Tuple[QueueEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def size(self) -> int:
        return len(self.entries)

    @property
    def can_merge(self) -> bool:
        """Whether the merge operation should be enabled."""
        return self.size >= MIN_MERGE_INPUTS

    def names(self) -> List[str]:
        return [entry.display_name for entry in self.entries]

    def snapshot(self) -> Tuple[QueueEntry, ...]:
        return self.entries

    def add(self, files: Sequence[RawFile]) -> "DocumentQueue":
        """Append PDFs, skipping non-PDFs and names already queued.

        Skipped files are not errors; the first file with a given name wins.
        """
        seen = set(self.names())
        accepted: List[RawFile] = [entry.file for entry in self.entries]

        for f in files:
            if f.content_type != PDF_CONTENT_TYPE:
                logger.debug(f"Skipping non-PDF file '{f.name}' ({f.content_type})")
                continue
            if f.name in seen:
                logger.debug(f"Skipping duplicate file '{f.name}'")
                continue
            seen.add(f.name)
            accepted.append(f)

        return DocumentQueue(_renumber(accepted))

    def remove_at(self, index: int) -> "DocumentQueue":
        """Remove the entry at ``index``.

        Raises:
            IndexOutOfBounds: If no entry has that position.
        """
        if not 0 <= index < self.size:
            raise IndexOutOfBounds(f"No queue entry at position {index} (size {self.size})")
        files = [entry.file for entry in self.entries if entry.position != index]
        return DocumentQueue(_renumber(files))

    def reorder(self, new_order: Sequence[int]) -> "DocumentQueue":
        """Rearrange entries; ``new_order[i]`` is the old position now at ``i``.

        Raises:
            InvalidPermutation: If ``new_order`` is not a permutation of the
                current positions. The queue is left unchanged.
        """
        order = list(new_order)
        if sorted(order) != list(range(self.size)):
            raise InvalidPermutation(
                f"Order {order} is not a permutation of {self.size} positions"
            )
        return DocumentQueue(_renumber(self.entries[i].file for i in order))

    def move(self, source: int, target: int) -> "DocumentQueue":
        """Move one entry from ``source`` to ``target``, as a drag gesture does."""
        if not 0 <= source < self.size:
            raise IndexOutOfBounds(f"No queue entry at position {source} (size {self.size})")
        if not 0 <= target < self.size:
            raise IndexOutOfBounds(f"No queue entry at position {target} (size {self.size})")
        order = [i for i in range(self.size) if i != source]
        order.insert(target, source)
        return self.reorder(order)
