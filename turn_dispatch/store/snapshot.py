"""
Durable snapshot of the queue state.

The whole state lives in one JSON document that is rewritten on every
mutation. Writes go to a temporary file in the same directory which is
fsynced and then atomically renamed over the target, so a reader never
sees a half-written snapshot.
"""

import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError as SchemaError

from turn_dispatch.errors import PersistenceFailure
from turn_dispatch.types.ticket import QueueSnapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    File-backed snapshot storage.

    Load never fails: a missing or unreadable snapshot is treated as a first
    run. Save failures are raised as PersistenceFailure.
    """

    def __init__(self, path: str | os.PathLike[str]):
        """
        Initialize the snapshot store.

        Args:
            path: Location of the snapshot file.
        """
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> QueueSnapshot:
        """
        Read the snapshot from disk.

        Returns:
            The stored snapshot, or an empty one if the file is missing or
            cannot be parsed.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info(
                "No snapshot found, starting with empty queues",
                extra={"path": str(self._path)},
            )
            return QueueSnapshot()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(
                "Snapshot unreadable, starting with empty queues",
                extra={"path": str(self._path), "error": str(e)},
            )
            return QueueSnapshot()

        try:
            snapshot = QueueSnapshot.model_validate_json(raw)
        except SchemaError as e:
            logger.warning(
                "Snapshot corrupt, starting with empty queues",
                extra={"path": str(self._path), "error": str(e)},
            )
            return QueueSnapshot()

        logger.info(
            "Snapshot loaded",
            extra={
                "path": str(self._path),
                "vip": len(snapshot.vip),
                "priority": len(snapshot.priority),
                "general": len(snapshot.general),
            },
        )
        return snapshot

    def save(self, snapshot: QueueSnapshot) -> None:
        """
        Replace the stored snapshot.

        Args:
            snapshot: The full state to persist.

        Raises:
            PersistenceFailure: If the file cannot be written or replaced.
        """
        payload = snapshot.model_dump_json(by_alias=True, indent=2)
        directory = self._path.parent
        tmp_name: str | None = None

        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                dir=directory,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as e:
            logger.error(
                "Snapshot write failed",
                extra={"path": str(self._path), "error": str(e)},
            )
            raise PersistenceFailure(f"Queue state could not be persisted: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning(
                        "Could not remove temporary snapshot",
                        extra={"path": tmp_name},
                    )
