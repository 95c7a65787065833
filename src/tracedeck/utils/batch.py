"""
Batch processing utilities.

This module runs the pipeline over many files. Concurrency is bounded so a
directory of large PDFs or images never has more than ``max_workers``
documents decoded in memory at once. Each file also gets its own deadline,
counted from when it gets a slot. A timed-out decode cannot be interrupted,
so it keeps its slot until the worker thread returns. Any failure or timeout
only marks that file as failed.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from config.settings import ProcessingSettings, settings
from ..errors import DocumentIOError, TraceDeckError
from ..models import DocumentResult
from ..pipeline import process_document

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class FileOutcome:
    """Result of one file in a batch."""

    path: Path
    result: Optional[DocumentResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.result is not None


@dataclass
class BatchReport:
    """Aggregated counts for a batch run."""

    outcomes: List[FileOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def processed(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return self.total - self.processed

    @property
    def success_rate(self) -> float:
        """Percentage of files processed successfully (0.0 for an empty batch)."""
        return (self.processed / self.total) * 100.0 if self.total else 0.0


def collect_files(directory: PathLike, extension: Optional[str] = None) -> List[Path]:
    """
    List the regular files directly inside ``directory``.

    Args:
        directory: Directory to scan (not recursive)
        extension: Optional case-insensitive extension filter, with or without the dot

    Returns:
        Sorted list of file paths
    """
    root = Path(directory)
    if not root.is_dir():
        raise DocumentIOError(f"{root}: not a directory")

    wanted = extension.lower().lstrip(".") if extension else None
    files = []
    for entry in sorted(root.iterdir()):
        if not entry.is_file():
            continue
        if wanted is not None and entry.suffix.lower().lstrip(".") != wanted:
            continue
        files.append(entry)
    return files


async def process_batch(
    paths: Iterable[PathLike],
    *,
    max_workers: Optional[int] = None,
    timeout_s: Optional[float] = None,
    options: Optional[ProcessingSettings] = None,
    on_progress: Optional[Callable[[FileOutcome], None]] = None,
) -> BatchReport:
    """
    Process every path concurrently, at most ``max_workers`` at a time.

    Args:
        paths: Files to process
        max_workers: Concurrency bound (defaults to ``settings.batch.max_workers``)
        timeout_s: Per-file deadline in seconds (defaults to ``settings.batch.timeout_s``)
        options: Processing settings passed to every pipeline run
        on_progress: Called once per finished file, in completion order

    Returns:
        BatchReport with outcomes in input order
    """
    workers = max_workers or settings.batch.max_workers
    deadline = timeout_s if timeout_s is not None else settings.batch.timeout_s
    semaphore = asyncio.Semaphore(max(1, workers))
    ordered = [Path(p) for p in paths]
    decodes: List[asyncio.Future] = []

    async def run_one(path: Path) -> FileOutcome:
        await semaphore.acquire()
        decode = asyncio.ensure_future(asyncio.to_thread(process_document, path, options))
        # the slot is freed when the worker thread returns, not when we stop waiting for it
        decode.add_done_callback(lambda _done: semaphore.release())
        decodes.append(decode)
        try:
            result = await asyncio.wait_for(asyncio.shield(decode), timeout=deadline)
            outcome = FileOutcome(path=path, result=result)
        except asyncio.TimeoutError:
            outcome = FileOutcome(path=path, error=f"timed out after {deadline:g} s")
        except TraceDeckError as exc:
            outcome = FileOutcome(path=path, error=str(exc))
        except Exception as exc:
            logger.error("Batch: unexpected %s while processing %s", type(exc).__name__, path, exc_info=True)
            outcome = FileOutcome(path=path, error=f"{type(exc).__name__}: {exc}")
        if outcome.ok:
            logger.debug("Batch: %s ok", path)
        else:
            logger.warning("Batch: %s failed: %s", path, outcome.error)
        if on_progress is not None:
            on_progress(outcome)
        return outcome

    outcomes = await asyncio.gather(*(run_one(p) for p in ordered))
    # timed-out decodes keep running; results and errors are already reported
    await asyncio.gather(*decodes, return_exceptions=True)
    report = BatchReport(outcomes=list(outcomes))
    logger.info("Batch finished: %d processed, %d failed of %d", report.processed, report.failed, report.total)
    return report


def run_batch(paths: Iterable[PathLike], **kwargs) -> BatchReport:
    """Synchronous wrapper around :func:`process_batch`."""
    return asyncio.run(process_batch(paths, **kwargs))
