"""Task-to-Slack-message mapping used to thread follow-up notifications."""

import logging
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path
from threading import Lock
from typing import Any

from taskbot.stores.json_file import JsonStateFile

logger = logging.getLogger(__name__)


@dataclass
class TaskMessageRef:
    """Where the announcement for a Basecamp to-do was posted."""

    task_id: str
    channel_id: str
    message_ts: str
    project_id: str | None = None
    task_title: str | None = None
    created_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskMessageRef":
        return cls(
            task_id=str(data["task_id"]),
            channel_id=data["channel_id"],
            message_ts=data["message_ts"],
            project_id=data.get("project_id"),
            task_title=data.get("task_title"),
            created_at=data.get("created_at"),
        )


class TaskMessageStore:
    """Persists work item id -> announcement message. Most recent write wins."""

    STATE_FILE = "task_messages.json"

    def __init__(self, state_dir: Path):
        self._file = JsonStateFile(Path(state_dir) / self.STATE_FILE)
        self._lock = Lock()
        self._refs: dict[str, TaskMessageRef] = {}
        for task_id, entry in self._file.load().items():
            try:
                self._refs[task_id] = TaskMessageRef.from_dict(entry)
            except (KeyError, TypeError) as e:
                logger.error(f"Failed to parse task message mapping {task_id}: {e}")
        logger.debug(f"Loaded {len(self._refs)} task message mapping(s)")

    def remember(
        self,
        task_id: str,
        channel_id: str,
        message_ts: str,
        project_id: str | None = None,
        task_title: str | None = None,
    ) -> TaskMessageRef:
        ref = TaskMessageRef(
            task_id=str(task_id),
            channel_id=channel_id,
            message_ts=message_ts,
            project_id=str(project_id) if project_id is not None else None,
            task_title=task_title,
            created_at=datetime.now(UTC).isoformat(),
        )
        with self._lock:
            self._refs[ref.task_id] = ref
            self._file.save({key: value.to_dict() for key, value in self._refs.items()})
        logger.debug(f"Stored message mapping for task {task_id}: {channel_id}/{message_ts}")
        return ref

    def lookup(self, task_id: str | None) -> TaskMessageRef | None:
        if task_id is None:
            return None
        with self._lock:
            return self._refs.get(str(task_id))
