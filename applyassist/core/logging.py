import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, default=str)


class StatusFormatter(logging.Formatter):
    """One human-readable status line per record, for the operator watching the run."""

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        return f"[{stamp}] [{record.levelname}] {record.getMessage()}"


def session_log_path(log_dir: Path, now: datetime | None = None) -> Path:
    current = now or datetime.now()
    return log_dir / f"session-{current.strftime('%Y-%m-%dT%H-%M-%S')}.log"


def setup_logging(level: int | str = logging.INFO, log_dir: Path | None = None) -> Path | None:
    root = logging.getLogger()
    root.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StatusFormatter())
    root.handlers = [handler]

    if log_dir is None:
        return None
    log_dir.mkdir(parents=True, exist_ok=True)
    path = session_log_path(log_dir)
    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setFormatter(JsonFormatter())
    root.addHandler(file_handler)
    return path
