"""Watches spec directories and re-translates documents after edits settle.

Each file path gets its own debounce timer: every change event cancels the
pending timer for that path and arms a new one, so a burst of writes from
one save turns into a single translation once the file has been quiet for
``delay`` seconds. Different paths never share a timer and may translate
at the same time.
"""

import logging
import threading
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from readerspec.config import DOCUMENT_EXTENSION
from readerspec.errors import DocumentIOError
from readerspec.storage import read_document
from readerspec.translator.service import TranslationService

logger = logging.getLogger(__name__)

DEBOUNCE_DELAY = 1.0


class _DocumentEventHandler(FileSystemEventHandler):
    """Forwards file events for readerspec documents to the watcher."""

    def __init__(self, watcher: "FileWatcher"):
        self.watcher = watcher

    def on_created(self, event: FileSystemEvent) -> None:
        self._forward(event, event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._forward(event, event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        self._forward(event, event.dest_path)

    def _forward(self, event: FileSystemEvent, path) -> None:
        if event.is_directory:
            return
        if isinstance(path, bytes):
            path = path.decode()
        if str(path).endswith(self.watcher.extension):
            self.watcher.handle_change(path)


class FileWatcher:
    """Debounced, per-file trigger for ``TranslationService.translate_and_update``."""

    def __init__(
        self,
        service: TranslationService,
        paths: list[Path | str] | None = None,
        delay: float = DEBOUNCE_DELAY,
        extension: str = DOCUMENT_EXTENSION,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
        observer_factory: Callable[[], Observer] = Observer,
    ):
        self.service = service
        self.paths = [Path(p).resolve() for p in (paths or ["specs"])]
        self.delay = delay
        self.extension = extension
        self._timer_factory = timer_factory
        self._observer_factory = observer_factory
        self._observer = None
        self._timers: dict[str, tuple[object, threading.Timer]] = {}
        self._written: dict[str, str] = {}
        self._lock = threading.Lock()
        self._watching = False
        self._stopped = False

    @property
    def is_watching(self) -> bool:
        return self._watching

    def pending(self) -> list[str]:
        """Paths with an armed debounce timer."""
        with self._lock:
            return sorted(self._timers)

    def start(self) -> None:
        if self._stopped:
            logger.warning("File watcher was stopped and cannot be restarted")
            return
        if self._watching:
            logger.info("File watcher is already running")
            return

        observer = self._observer_factory()
        handler = _DocumentEventHandler(self)
        for path in self.paths:
            if not path.is_dir():
                logger.error("Cannot watch %s: directory does not exist", path)
                continue
            observer.schedule(handler, str(path), recursive=True)
        observer.start()

        self._observer = observer
        self._watching = True
        logger.info("Watching %s", ", ".join(str(p) for p in self.paths))

    def stop(self) -> None:
        """Cancel pending timers and stop observing, permanently.

        Translations already running are left to finish.
        """
        with self._lock:
            self._stopped = True
            for _, timer in self._timers.values():
                timer.cancel()
            self._timers.clear()

        if not self._watching:
            return
        self._watching = False
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None
        logger.info("File watcher stopped")

    def handle_change(self, path: Path | str) -> None:
        """Re-arm the debounce timer for ``path``."""
        key = str(Path(path).resolve())
        token = object()
        with self._lock:
            if self._stopped:
                return
            existing = self._timers.pop(key, None)
            if existing is not None:
                existing[1].cancel()
            timer = self._timer_factory(self.delay, self._on_timer, args=(key, token))
            timer.daemon = True
            self._timers[key] = (token, timer)
            timer.start()

    def _on_timer(self, key: str, token: object) -> None:
        with self._lock:
            entry = self._timers.get(key)
            # Superseded by a newer event, or cancelled by stop().
            if entry is None or entry[0] is not token:
                return
            del self._timers[key]
        self._process(key)

    def translate_now(self, path: Path | str) -> None:
        """Translate immediately, bypassing the debounce timer."""
        logger.info("Manual translation requested for %s", path)
        self._process(str(Path(path).resolve()), force=True)

    def _current_content(self, path: str) -> str | None:
        try:
            return read_document(path, self.extension).content
        except DocumentIOError:
            return None

    def _process(self, path: str, force: bool = False) -> None:
        # Our own write fires a change event too; skip it when nothing else changed.
        written = self._written.get(path)
        if not force and written is not None and written == self._current_content(path):
            logger.debug("Ignoring change to %s: content is the last translation", path)
            return

        logger.info("Processing file change: %s", path)
        try:
            result = self.service.translate_and_update(path)
        except Exception:
            logger.exception("Error processing file change for %s", path)
            return

        if result.success:
            logger.info("Translated and updated %s", path)
            if result.confidence is not None:
                logger.info("Translation confidence: %.1f%%", result.confidence * 100)
            content = self._current_content(path)
            if content is not None:
                self._written[path] = content
        else:
            logger.error("Translation failed for %s: %s", path, result.error)
