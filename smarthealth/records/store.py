import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Generic, Iterator, List, Optional, Type, Union

from filelock import FileLock, Timeout

from .errors import LOADING, SAVING, MalformedRecordError, PersistenceError
from .models import R, parse_record, serialize_record
from ..config import MalformedLinePolicy

logger = logging.getLogger(__name__)


class RecordStore(Generic[R]):
    """Whole-file store for one record type.

    Every operation reads the complete file and every mutation rewrites it.
    A FileLock beside the file is held for the whole read-modify-write.
    """

    def __init__(self, path: Union[str, Path], record_type: Type[R],
                 delimiter: str = ",",
                 malformed: MalformedLinePolicy = MalformedLinePolicy.STRICT,
                 lock_timeout: float = 10.0,
                 key: Callable[[R], int] = lambda record: record.id):
        self.path = Path(path)
        self.record_type = record_type
        self.delimiter = delimiter
        self.malformed = MalformedLinePolicy(malformed)
        self.key = key
        self._lock = FileLock(str(self.path) + ".lock", timeout=lock_timeout)
        # The file lock keeps other processes out, the RLock other threads.
        self._thread_lock = threading.RLock()

    @property
    def label(self) -> str:
        return self.path.stem

    @contextmanager
    def locked(self, operation: str = SAVING) -> Iterator[None]:
        """Hold this store's locks; reentrant, so store calls inside reuse them."""
        with self._thread_lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._lock.acquire()
            except Timeout as e:
                raise PersistenceError(f"Timed out waiting for lock on {self.path}", operation) from e
            except OSError as e:
                raise PersistenceError(f"Could not lock {self.path}: {e}", operation) from e
            try:
                yield
            finally:
                self._lock.release()

    def load_all(self) -> List[R]:
        """Load every record; a missing file is an empty store."""
        if not self.path.exists():
            return []
        with self.locked(LOADING):
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    lines = [line.rstrip("\n") for line in f]
            except FileNotFoundError:
                return []
            except OSError as e:
                raise PersistenceError(f"Could not read {self.path}: {e}", LOADING) from e

        records = []
        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                records.append(parse_record(self.record_type, line, self.delimiter))
            except MalformedRecordError as e:
                if self.malformed == MalformedLinePolicy.STRICT:
                    raise MalformedRecordError(str(e), str(self.path), line_number) from e
                logger.warning("Skipping malformed line %d in %s: %s", line_number, self.path, e)
        return records

    def save_all(self, records: List[R]) -> None:
        """Replace the file contents with one line per record, in order."""
        # Serialize first so a bad value never truncates the file.
        lines = [serialize_record(record, self.delimiter) + "\n" for record in records]
        temp_file = self.path.with_suffix(self.path.suffix + ".tmp")
        with self.locked(SAVING):
            try:
                # Write to temporary file first, then rename to avoid corruption
                with open(temp_file, "w", encoding="utf-8") as f:
                    f.writelines(lines)
                os.replace(temp_file, self.path)
            except OSError as e:
                temp_file.unlink(missing_ok=True)
                raise PersistenceError(f"Could not write {self.path}: {e}", SAVING) from e
        logger.debug("Saved %d %s to %s", len(records), self.label, self.path)

    def add(self, record: R) -> R:
        with self.locked():
            records = self.load_all()
            records.append(record)
            self.save_all(records)
        return record

    def add_new(self, build: Callable[[int], R]) -> R:
        """Allocate the next id, build the record with it and append it, in one locked pass."""
        with self.locked():
            records = self.load_all()
            record = build(max((self.key(r) for r in records), default=0) + 1)
            records.append(record)
            self.save_all(records)
        return record

    def update(self, record: R) -> bool:
        """Replace the first record with the same id.

        Without a match the collection is rewritten unchanged and False is
        returned; callers check existence beforehand.
        """
        record_id = self.key(record)
        updated = False
        with self.locked():
            records = self.load_all()
            for idx, existing in enumerate(records):
                if self.key(existing) == record_id:
                    records[idx] = record
                    updated = True
                    break
            self.save_all(records)
        return updated

    def delete(self, record_id: int) -> int:
        """Remove every record with this id and return how many went."""
        with self.locked():
            records = self.load_all()
            remaining = [r for r in records if self.key(r) != record_id]
            self.save_all(remaining)
        return len(records) - len(remaining)

    def get_by_id(self, record_id: int) -> Optional[R]:
        for record in self.load_all():
            if self.key(record) == record_id:
                return record
        return None

    def next_id(self) -> int:
        return max((self.key(r) for r in self.load_all()), default=0) + 1
