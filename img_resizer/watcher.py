import time
import queue
import logging
import threading

from enum import Enum
from pathlib import Path
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler
from concurrent.futures import Future, ThreadPoolExecutor
from img_resizer.options import Configuration
from img_resizer.settings import DEFAULT_SETTLE_TIME, Settings
from img_resizer import PROGRAM_NAME
from img_resizer.resizer import ResizeOutcome, resize_image
from img_resizer.utils.exceptions import WatchSetupError

logger = logging.getLogger(__name__)


class WatchState(Enum):
    IDLE = "idle"
    WATCHING = "watching"
    STOPPED = "stopped"


@dataclass
class WatchSummary:
    processed: int = 0
    failed: int = 0
    dropped: int = 0

    @property
    def exit_status(self) -> int:
        return 1 if self.failed or self.dropped else 0


class ResizeEventHandler(FileSystemEventHandler):
    """
    Кладет новые файлы из папки в буфер, не блокируя поток наблюдателя.

    Созданный файл ждет, пока его дописывают: он уходит в буфер после
    закрытия на запись или когда его размер перестал меняться settle_time
    секунд. Перенесенный в папку файл уже готов и уходит в буфер сразу.
    """

    def __init__(
        self,
        watch_dir: str | Path,
        events: queue.Queue,
        settle_time: float = DEFAULT_SETTLE_TIME,
    ):
        self.watch_dir = Path(watch_dir).resolve()
        self.events = events
        self.settle_time = settle_time
        self.dropped = 0
        # путь -> (последний размер, с какого момента не меняется)
        self._pending: Dict[Path, Tuple[Optional[int], float]] = {}
        self._lock = threading.Lock()

    def on_created(self, event):
        # нам нужно обрабатывать только файлы, а не папки
        if event.is_directory:
            return
        with self._lock:
            self._pending[Path(event.src_path)] = (None, time.monotonic())

    def on_closed(self, event):
        # файл дописан и закрыт
        if event.is_directory:
            return
        file_path = Path(event.src_path)
        with self._lock:
            if file_path not in self._pending:
                return
            del self._pending[file_path]
        self._push(file_path)

    def on_moved(self, event):
        # файл переименовали внутри папки или перенесли в нее
        if event.is_directory:
            return
        dest_path = Path(event.dest_path)
        with self._lock:
            self._pending.pop(Path(event.src_path), None)
            self._pending.pop(dest_path, None)
        if dest_path.parent.resolve() == self.watch_dir:
            self._push(dest_path)

    def flush_settled(self) -> int:
        """Отдает файлы без события закрытия, размер которых перестал меняться"""
        now = time.monotonic()
        settled = []
        with self._lock:
            for file_path, (size, since) in list(self._pending.items()):
                try:
                    current_size = file_path.stat().st_size
                except OSError:
                    logger.debug(f"{file_path.name} disappeared before processing")
                    del self._pending[file_path]
                    continue

                if current_size != size:
                    self._pending[file_path] = (current_size, now)
                elif now - since >= self.settle_time:
                    del self._pending[file_path]
                    settled.append(file_path)

        for file_path in settled:
            self._push(file_path)
        return len(settled)

    def waiting(self) -> List[Path]:
        with self._lock:
            return list(self._pending)

    def _push(self, file_path: Path):
        try:
            self.events.put_nowait(file_path)
        except queue.Full:
            with self._lock:
                self.dropped += 1
            logger.warning(f"⚠️ Event buffer is full, skipping {file_path.name}")


class DirectoryWatcher:
    def __init__(
        self,
        config: Configuration,
        settings: Optional[Settings] = None,
        stop_event: Optional[threading.Event] = None,
    ):
        settings = settings or Settings()
        self.config = config
        self.in_dir = Path(config.watch_in_dir)
        self.out_dir = Path(config.watch_out_dir)
        self.poll_interval = settings.POLL_INTERVAL
        self.workers = settings.WORKERS
        self.stop_event = stop_event or threading.Event()
        self.events: queue.Queue = queue.Queue(maxsize=settings.EVENT_BUFFER)
        self.handler = ResizeEventHandler(
            self.in_dir, self.events, settings.SETTLE_TIME
        )
        self.summary = WatchSummary()
        self.state = WatchState.IDLE

        self._observer = None
        self._pool: Optional[ThreadPoolExecutor] = None
        self._futures: List[Future] = []

    def prepare_directories(self):
        """Создает папки наблюдения, если их нет"""
        for directory in (self.in_dir, self.out_dir):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise WatchSetupError(f"Cannot create directory '{directory}': {e}")

    def start(self):
        if self.state is not WatchState.IDLE:
            raise WatchSetupError(f"Watcher is already {self.state.value}")

        self.prepare_directories()
        self._pool = ThreadPoolExecutor(
            max_workers=self.workers, thread_name_prefix="resize"
        )

        observer = Observer()
        try:
            observer.schedule(self.handler, str(self.in_dir), recursive=False)
            observer.start()
        except OSError as e:
            self._pool.shutdown(wait=False)
            raise WatchSetupError(f"Cannot watch '{self.in_dir}': {e}")

        self._observer = observer
        self.state = WatchState.WATCHING
        logger.info(f"Watching {self.in_dir} and output will go to {self.out_dir}")

    def submit(self, source: Path) -> Future:
        destination = self.out_dir / source.name
        logger.info(f"Created - File: {source} => {destination}")
        future = self._pool.submit(
            resize_image, source, self.config.width, self.config.height, destination
        )
        self._futures.append(future)
        return future

    def dispatch(self, timeout: Optional[float] = None) -> int:
        """Передает события из буфера обработчикам. Возвращает число задач."""
        submitted = 0
        try:
            if timeout:
                source = self.events.get(timeout=timeout)
            else:
                source = self.events.get_nowait()
        except queue.Empty:
            return submitted

        while True:
            self.submit(source)
            submitted += 1
            try:
                source = self.events.get_nowait()
            except queue.Empty:
                return submitted

    def collect(self):
        """Забирает результаты завершенных задач"""
        still_running = []
        for future in self._futures:
            if future.done():
                self._record(future)
            else:
                still_running.append(future)
        self._futures = still_running

    def _record(self, future: Future):
        try:
            outcome: ResizeOutcome = future.result()
        except Exception as e:
            # resize_image сам ловит ошибки, сюда попадаем только при сбое пула
            logger.error(f"{PROGRAM_NAME}: {e}")
            self.summary.failed += 1
            return

        if outcome.ok:
            self.summary.processed += 1
        else:
            self.summary.failed += 1

    def run(self) -> WatchSummary:
        """Обрабатывает события, пока не выставлен stop_event"""
        if self.state is WatchState.IDLE:
            self.start()

        while not self.stop_event.is_set():
            self.handler.flush_settled()
            self.dispatch(timeout=self.poll_interval)
            self.collect()

        return self.stop()

    def stop(self) -> WatchSummary:
        if self.state is WatchState.STOPPED:
            return self.summary

        if self._observer is not None:
            self._observer.stop()
            self._observer.join()

        if self._pool is not None:
            self.dispatch()
            self._pool.shutdown(wait=True)
            self.collect()

        for file_path in self.handler.waiting():
            logger.warning(f"⚠️ {file_path.name} was still being written, skipped")
        self.summary.dropped = self.handler.dropped
        self.state = WatchState.STOPPED
        logger.info(
            f"Watching finished: {self.summary.processed} processed, "
            f"{self.summary.failed} failed, {self.summary.dropped} dropped"
        )
        return self.summary
