"""
UploadSimulator - fabricated per-file upload progress.

Every accepted file gets its own repeating timer. Each tick adds a fixed
step to the progress; at 100 the entry moves to "processing", and on the
following tick to "complete", where its timer stops. Nothing is stored or
parsed.
"""

import uuid
from typing import Callable, Iterable, List, Optional

import structlog

from bsa_discovery.config.models import UploadSettings
from bsa_discovery.exceptions import UploadRejectedError
from bsa_discovery.notices import NoticeBoard
from bsa_discovery.scheduling import IntervalTimer, Scheduler, TimerRegistry
from bsa_discovery.uploads.models import FileHandle, UploadEntry, UploadStatus
from bsa_discovery.uploads.validation import supported_types_hint, validate_file

logger = structlog.get_logger("uploads")


def default_id_factory() -> str:
    return uuid.uuid4().hex[:12]


class UploadSimulator:
    """
    Owns the upload entry list and the per-entry progress timers.

    Args:
        scheduler: Timer source for the progress ticks.
        settings: Accepted types, size limit, tick interval and step.
        notices: Board receiving rejection warnings.
        id_factory: Produces entry ids; injected for deterministic tests.
        on_files_change: Called with the full accepted-file list whenever
            it changes.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        settings: Optional[UploadSettings] = None,
        notices: Optional[NoticeBoard] = None,
        id_factory: Callable[[], str] = default_id_factory,
        on_files_change: Optional[Callable[[List[FileHandle]], None]] = None,
        session_id: str = "",
    ):
        self.scheduler = scheduler
        self.settings = settings or UploadSettings()
        self.notices = notices if notices is not None else NoticeBoard()
        self._id_factory = id_factory
        self._on_files_change = on_files_change
        self._session_id = session_id

        self.entries: List[UploadEntry] = []
        self.accepted_files: List[FileHandle] = []
        self._timers = TimerRegistry()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def submit(self, candidates: Iterable[FileHandle]) -> List[UploadEntry]:
        """Validate candidates and start a progress timer for each accepted one.

        Rejected files produce a destructive notice and are skipped; they
        never reach the entry list or the accepted-file list.

        Returns:
            The entries created by this call.
        """
        valid: List[FileHandle] = []
        for candidate in candidates:
            try:
                validate_file(candidate, self.settings)
            except UploadRejectedError as exc:
                self.notices.error(exc.title, str(exc))
                logger.warning(
                    "upload_rejected",
                    session_id=self._session_id,
                    filename=exc.filename,
                    reason=type(exc).__name__,
                    size=candidate.size,
                )
                continue
            valid.append(candidate)

        if not valid:
            return []

        created = [self._start(f) for f in valid]
        self.accepted_files = [*self.accepted_files, *valid]
        self._notify_files_changed()
        logger.info(
            "uploads_accepted",
            session_id=self._session_id,
            files=[f.name for f in valid],
            total=len(self.entries),
        )
        return created

    def remove(self, entry_id: str) -> bool:
        """Drop an entry, stop its timer and forget files with the same name.

        Safe while the entry is still ticking. Returns False for unknown ids.
        """
        self._timers.cancel(entry_id)
        entry = self.get(entry_id)
        if entry is None:
            return False

        self.entries = [e for e in self.entries if e.id != entry_id]
        self.accepted_files = [f for f in self.accepted_files if f.name != entry.file.name]
        self._notify_files_changed()
        logger.info(
            "upload_removed",
            session_id=self._session_id,
            entry_id=entry_id,
            filename=entry.file.name,
            status=entry.status.value,
        )
        return True

    def close(self) -> int:
        """Cancel every running progress timer. Returns how many were live."""
        cancelled = self._timers.cancel_all()
        if cancelled:
            logger.debug("upload_timers_cancelled", session_id=self._session_id, count=cancelled)
        return cancelled

    def get(self, entry_id: str) -> Optional[UploadEntry]:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    @property
    def active_timers(self) -> int:
        return len(self._timers)

    @property
    def all_complete(self) -> bool:
        return all(e.status is UploadStatus.COMPLETE for e in self.entries)

    def view(self) -> dict:
        """Render-ready state for the upload panel."""
        return {
            "hint": supported_types_hint(self.settings),
            "accepted_types": [f".{ext}" for ext in self.settings.accepted_extensions],
            "entries": [e.to_view() for e in self.entries],
            "count": len(self.entries),
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _new_id(self) -> str:
        # Retry on collision with a live entry
        for _ in range(3):
            candidate = self._id_factory()
            if self.get(candidate) is None:
                return candidate
        raise RuntimeError("Could not allocate a unique upload id")

    def _start(self, file: FileHandle) -> UploadEntry:
        entry = UploadEntry(id=self._new_id(), file=file)
        self.entries.append(entry)
        interval = self.settings.tick_interval_ms / 1000
        timer = IntervalTimer(self.scheduler, interval, self._tick, entry.id).start()
        self._timers.register(entry.id, timer)
        return entry

    def _tick(self, entry_id: str) -> None:
        entry = self.get(entry_id)
        if entry is None:
            # Removed between scheduling and firing
            self._timers.cancel(entry_id)
            return

        if entry.progress < 100:
            entry.progress = min(100, entry.progress + self.settings.progress_step)
        elif entry.status is UploadStatus.UPLOADING:
            entry.status = UploadStatus.PROCESSING
            logger.debug("upload_processing", session_id=self._session_id, entry_id=entry_id)
        elif entry.status is UploadStatus.PROCESSING:
            entry.status = UploadStatus.COMPLETE
            self._timers.cancel(entry_id)
            logger.info(
                "upload_complete",
                session_id=self._session_id,
                entry_id=entry_id,
                filename=entry.file.name,
            )
        else:
            self._timers.cancel(entry_id)

    def _notify_files_changed(self) -> None:
        if self._on_files_change is not None:
            self._on_files_change(list(self.accepted_files))
