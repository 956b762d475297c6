#!/usr/bin/env python3
"""Session state and user commands.

The interface layer (the CLI, or any front end) owns one Session value and
replaces it with the session each command returns. A command never mutates
its input; it returns a Step: the next session plus at most one effect for
the interface to perform (offer a download, show an error, show a size
estimate).

Operations that take a while are split in three:

    job = start_merge(session, toolkit)    # snapshot inputs, note generation
    outcome = execute(job)                 # the actual work
    step = settle(current_session, outcome)

Every reset bumps the session generation. settle() drops the outcome's
effect when the session has been reset since the job started, so an
operation that finishes after the user moved on cannot trigger a download.

Usage:
    session = Session()
    session = add_files(session, [raw_a, raw_b]).session
    step = run(session, start_merge(session, toolkit))
    if isinstance(step.effect, Download):
        save(step.effect.artifact)
    session = step.session
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Sequence, Union

from pdfworks.backends import get_archiver, get_document_model, get_rasterizer
from pdfworks.backends.base import ArchiveProvider, DocumentModelProvider, RasterizerProvider
from pdfworks.compress import compress, estimate_preview
from pdfworks.config import Settings
from pdfworks.errors import (
    IndexOutOfBounds,
    InvalidInputType,
    InvalidPermutation,
    PdfWorksError,
    ProcessingFailure,
    UnreadableDocument,
)
from pdfworks.merge import merge_queue
from pdfworks.naming import (
    compressed_name,
    exploded_archive_name,
    merged_name,
    numbered_name,
    split_name,
)
from pdfworks.numbering import number_pages
from pdfworks.queue import DocumentQueue
from pdfworks.ranges import parse_page_range
from pdfworks.split import explode_pages, extract_pages
from pdfworks.types import (
    DEFAULT_LABEL_TEMPLATE,
    PDF_CONTENT_TYPE,
    Anchor,
    Artifact,
    Color,
    CompressionLevel,
    RawFile,
    SizeEstimate,
    SplitMode,
)

logger = logging.getLogger(__name__)

# ============================================================================
# STATE AND EFFECTS
# ============================================================================


@dataclass(frozen=True)
class Session:
    """Everything a user has chosen so far.

    Attributes:
        generation: Incremented on every reset.
        selected: The single file for numbering, compression or splitting.
        queue: Files waiting to be merged.
    """

    generation: int = 0
    selected: Optional[RawFile] = None
    queue: DocumentQueue = field(default_factory=DocumentQueue)

    def reset(self) -> "Session":
        return Session(generation=self.generation + 1)


@dataclass(frozen=True)
class Download:
    artifact: Artifact


@dataclass(frozen=True)
class ShowError:
    message: str


@dataclass(frozen=True)
class ShowEstimate:
    estimate: SizeEstimate


Effect = Union[Download, ShowError, ShowEstimate]


@dataclass(frozen=True)
class Step:
    session: Session
    effect: Optional[Effect] = None


@dataclass(frozen=True)
class Toolkit:
    """The providers and settings commands run with."""

    model: DocumentModelProvider
    rasterizer: RasterizerProvider
    archiver: ArchiveProvider
    settings: Settings = field(default_factory=Settings)
    progress: bool = False

    @classmethod
    def from_settings(cls, settings: Settings, progress: bool = False) -> "Toolkit":
        return cls(
            model=get_document_model(settings.document_backend),
            rasterizer=get_rasterizer(settings.raster_backend),
            archiver=get_archiver(settings.archive_backend),
            settings=settings,
            progress=progress,
        )


@dataclass(frozen=True)
class Job:
    """A started operation, bound to the generation it started in."""

    generation: int
    operation: str
    work: Callable[[], Artifact]


@dataclass(frozen=True)
class Outcome:
    generation: int
    operation: str
    effect: Effect


# ============================================================================
# IMMEDIATE COMMANDS
# ============================================================================


def select_file(session: Session, file: RawFile) -> Step:
    """Choose the file for numbering, compression or splitting.

    A non-PDF is rejected with a message and the session is unchanged.
    Selecting a file starts over, discarding anything still running.
    """
    if file.content_type != PDF_CONTENT_TYPE:
        logger.debug(f"Rejected '{file.name}' ({file.content_type})")
        return Step(session, ShowError(InvalidInputType.user_message))
    return Step(replace(session.reset(), selected=file))


def add_files(session: Session, files: Sequence[RawFile]) -> Step:
    """Queue files for merging; non-PDFs and repeated names are skipped.

    If none of the files is a PDF, the user is told so.
    """
    if files and all(f.content_type != PDF_CONTENT_TYPE for f in files):
        return Step(session, ShowError(InvalidInputType.user_message))
    return Step(replace(session, queue=session.queue.add(files)))


def remove_file(session: Session, index: int) -> Step:
    """Remove one queued file. An unknown index changes nothing."""
    try:
        queue = session.queue.remove_at(index)
    except IndexOutOfBounds as e:
        logger.debug(f"Ignoring removal: {e}")
        return Step(session)
    return Step(replace(session, queue=queue))


def reorder_files(session: Session, new_order: Sequence[int]) -> Step:
    """Apply a full new order to the queue. Anything but a permutation is ignored."""
    try:
        queue = session.queue.reorder(new_order)
    except InvalidPermutation as e:
        logger.warning(f"Ignoring reorder: {e}")
        return Step(session)
    return Step(replace(session, queue=queue))


def move_file(session: Session, source: int, target: int) -> Step:
    """Move one queued file, as dragging it in a list does."""
    try:
        queue = session.queue.move(source, target)
    except (IndexOutOfBounds, InvalidPermutation) as e:
        logger.debug(f"Ignoring move: {e}")
        return Step(session)
    return Step(replace(session, queue=queue))


def reset(session: Session) -> Step:
    """Start over. Results of operations still running will be dropped."""
    return Step(session.reset())


def preview_compression(session: Session, toolkit: Toolkit, level: CompressionLevel) -> Step:
    """Estimate the compressed size of the selected file.

    Does not end the session: the user can try other levels. A file that
    cannot be read is dropped, since no later command could use it either.
    """
    if session.selected is None:
        return Step(session, ShowError(InvalidInputType.user_message))

    file = session.selected
    try:
        doc = toolkit.model.load(file.data, file.name)
        try:
            estimate = estimate_preview(
                doc,
                level,
                toolkit.model,
                toolkit.rasterizer,
                quality_table=toolkit.settings.quality,
                scale=toolkit.settings.raster_scale,
                correction=toolkit.settings.estimate_correction,
            )
        finally:
            doc.close()
    except UnreadableDocument as e:
        logger.warning(f"Preview failed: {e}")
        return Step(session.reset(), ShowError(e.user_message))
    except PdfWorksError as e:
        logger.warning(f"Preview failed: {e}")
        return Step(session, ShowError(e.user_message))

    return Step(session, ShowEstimate(estimate))


# ============================================================================
# LONG-RUNNING OPERATIONS
# ============================================================================


def _require_selected(file: Optional[RawFile]) -> RawFile:
    if file is None:
        raise InvalidInputType("No file selected")
    return file


def start_number(
    session: Session,
    toolkit: Toolkit,
    expression: str = "all",
    anchor: Anchor = Anchor.BOTTOM_CENTER,
    template: str = DEFAULT_LABEL_TEMPLATE,
    font_size: Optional[float] = None,
    color: Color = (0.0, 0.0, 0.0),
) -> Job:
    """Prepare page numbering of the selected file."""
    selected = session.selected
    size = toolkit.settings.font_size if font_size is None else font_size

    def work() -> Artifact:
        file = _require_selected(selected)
        with toolkit.model.load(file.data, file.name) as doc:
            data = number_pages(
                doc,
                expression,
                toolkit.model,
                anchor=anchor,
                template=template,
                font_size=size,
                color=color,
                margin=toolkit.settings.margin,
                progress=toolkit.progress,
            )
        return Artifact(numbered_name(file.name), data)

    return Job(session.generation, "number", work)


def start_compress(session: Session, toolkit: Toolkit, level: CompressionLevel) -> Job:
    """Prepare compression of the selected file."""
    selected = session.selected

    def work() -> Artifact:
        file = _require_selected(selected)
        with toolkit.model.load(file.data, file.name) as doc:
            data = compress(
                doc,
                level,
                toolkit.model,
                toolkit.rasterizer,
                quality_table=toolkit.settings.quality,
                scale=toolkit.settings.raster_scale,
                progress=toolkit.progress,
            )
        return Artifact(compressed_name(file.name), data)

    return Job(session.generation, "compress", work)


def start_split(
    session: Session, toolkit: Toolkit, mode: SplitMode, expression: str = ""
) -> Job:
    """Prepare splitting of the selected file.

    In extract mode the expression is parsed strictly; in explode mode it
    is ignored.
    """
    selected = session.selected

    def work() -> Artifact:
        file = _require_selected(selected)
        with toolkit.model.load(file.data, file.name) as doc:
            if mode is SplitMode.EXTRACT:
                pages = parse_page_range(expression, toolkit.model.page_count(doc), strict=True)
                return Artifact(split_name(file.name), extract_pages(doc, pages, toolkit.model))

            data = explode_pages(
                doc, file.name, toolkit.model, toolkit.archiver, progress=toolkit.progress
            )
            return Artifact(
                exploded_archive_name(file.name, toolkit.archiver.extension),
                data,
                toolkit.archiver.content_type,
            )

    return Job(session.generation, "split", work)


def start_merge(session: Session, toolkit: Toolkit, timestamp_ms: Optional[int] = None) -> Job:
    """Prepare merging of the queued files, in queue order."""
    entries = session.queue.snapshot()

    def work() -> Artifact:
        data = merge_queue(entries, toolkit.model, progress=toolkit.progress)
        return Artifact(merged_name(timestamp_ms), data)

    return Job(session.generation, "merge", work)


def execute(job: Job) -> Outcome:
    """Run a job, turning any failure into an error message for the user.

    The technical cause is logged; only the short message reaches the user.
    """
    try:
        artifact = job.work()
    except PdfWorksError as e:
        logger.warning(f"{job.operation} failed: {e}")
        logger.debug("Failure detail", exc_info=True)
        return Outcome(job.generation, job.operation, ShowError(e.user_message))
    except Exception:
        logger.exception(f"{job.operation} failed unexpectedly")
        return Outcome(job.generation, job.operation, ShowError(ProcessingFailure.user_message))

    logger.info(f"{job.operation}: produced {artifact.filename} ({len(artifact.data):,} bytes)")
    return Outcome(job.generation, job.operation, Download(artifact))


def settle(session: Session, outcome: Outcome) -> Step:
    """Apply a finished operation to the current session.

    Success or failure, the session is reset afterwards (for a merge this
    empties the queue). If the session was reset while the job ran, its
    result is dropped and the session is left as it is.
    """
    if outcome.generation != session.generation:
        logger.info(
            f"Dropping stale {outcome.operation} result "
            f"(generation {outcome.generation}, session at {session.generation})"
        )
        return Step(session)
    return Step(session.reset(), outcome.effect)


def run(session: Session, job: Job) -> Step:
    """Execute a job and settle it against the same session."""
    return settle(session, execute(job))
