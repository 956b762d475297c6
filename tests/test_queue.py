"""Tests for pdfworks.queue - the merge queue."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from pdfworks.errors import IndexOutOfBounds, InvalidPermutation
from pdfworks.queue import DocumentQueue
from pdfworks.types import PDF_CONTENT_TYPE, RawFile


def pdf(name: str) -> RawFile:
    return RawFile(name=name, content_type=PDF_CONTENT_TYPE, data=b"%PDF-1.4 " + name.encode())


def queue_of(*names: str) -> DocumentQueue:
    return DocumentQueue().add([pdf(n) for n in names])


class TestAdd:
    """Tests for DocumentQueue.add."""

    def test_appends_in_order(self):
        """Files are appended in the order given."""
        assert queue_of("a.pdf", "b.pdf", "c.pdf").names() == ["a.pdf", "b.pdf", "c.pdf"]

    def test_positions_dense(self):
        """Positions are 0..n-1 in order."""
        queue = queue_of("a.pdf", "b.pdf")
        assert [e.position for e in queue.entries] == [0, 1]

    def test_skips_non_pdf(self):
        """Files with another content type are skipped."""
        text = RawFile(name="notes.txt", content_type="text/plain", data=b"hi")
        queue = DocumentQueue().add([pdf("a.pdf"), text])
        assert queue.names() == ["a.pdf"]

    def test_skips_duplicates(self):
        """A name already queued is skipped; the first file wins."""
        first = pdf("a.pdf")
        second = RawFile(name="a.pdf", content_type=PDF_CONTENT_TYPE, data=b"%PDF-other")
        queue = DocumentQueue().add([first]).add([second, pdf("b.pdf")])
        assert queue.names() == ["a.pdf", "b.pdf"]
        assert queue.entries[0].file is first

    def test_duplicates_within_one_call(self):
        """Duplicates inside the same batch are skipped too."""
        assert queue_of("a.pdf", "a.pdf").names() == ["a.pdf"]

    def test_immutable(self):
        """add returns a new queue and leaves the original alone."""
        original = queue_of("a.pdf")
        original.add([pdf("b.pdf")])
        assert original.names() == ["a.pdf"]

    def test_can_merge(self):
        """Merging is possible from two entries on."""
        assert not queue_of("a.pdf").can_merge
        assert queue_of("a.pdf", "b.pdf").can_merge


class TestRemove:
    """Tests for DocumentQueue.remove_at."""

    def test_remove_middle(self):
        """Removing renumbers the remaining entries."""
        queue = queue_of("a.pdf", "b.pdf", "c.pdf").remove_at(1)
        assert queue.names() == ["a.pdf", "c.pdf"]
        assert [e.position for e in queue.entries] == [0, 1]

    @pytest.mark.parametrize("index", [-1, 3, 10])
    def test_out_of_range(self, index):
        """Unknown positions raise IndexOutOfBounds."""
        with pytest.raises(IndexOutOfBounds):
            queue_of("a.pdf", "b.pdf", "c.pdf").remove_at(index)

    def test_removed_name_can_be_added_again(self):
        """After removal the same name is accepted again."""
        queue = queue_of("a.pdf", "b.pdf").remove_at(0).add([pdf("a.pdf")])
        assert queue.names() == ["b.pdf", "a.pdf"]


class TestReorder:
    """Tests for DocumentQueue.reorder and move."""

    def test_reorder(self):
        """new_order[i] names the old position placed at i."""
        queue = queue_of("a.pdf", "b.pdf", "c.pdf").reorder([2, 0, 1])
        assert queue.names() == ["c.pdf", "a.pdf", "b.pdf"]

    @pytest.mark.parametrize("order", [[0, 1], [0, 1, 1], [0, 1, 3], [], [0, 1, 2, 3]])
    def test_invalid_permutation(self, order):
        """Anything but a permutation raises InvalidPermutation."""
        with pytest.raises(InvalidPermutation):
            queue_of("a.pdf", "b.pdf", "c.pdf").reorder(order)

    def test_move_forward(self):
        """Moving the first entry to the end."""
        queue = queue_of("a.pdf", "b.pdf", "c.pdf").move(0, 2)
        assert queue.names() == ["b.pdf", "c.pdf", "a.pdf"]

    def test_move_backward(self):
        """Moving the last entry to the front."""
        queue = queue_of("a.pdf", "b.pdf", "c.pdf").move(2, 0)
        assert queue.names() == ["c.pdf", "a.pdf", "b.pdf"]

    def test_move_out_of_range(self):
        """Moving from or to a missing position raises IndexOutOfBounds."""
        with pytest.raises(IndexOutOfBounds):
            queue_of("a.pdf", "b.pdf").move(0, 5)

    @given(st.permutations(list(range(6))))
    def test_reorder_keeps_entries(self, order):
        """Any permutation keeps every entry and renumbers densely."""
        names = [f"{i}.pdf" for i in range(6)]
        queue = queue_of(*names).reorder(order)
        assert sorted(queue.names()) == sorted(names)
        assert queue.names() == [names[i] for i in order]
        assert [e.position for e in queue.entries] == list(range(6))
