import contextvars
import json
import logging
import os
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

_current_run_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "journey_run_id", default=None
)

_TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(run_id)s] %(message)s'
_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def current_run_id() -> Optional[str]:
    return _current_run_id.get()


@contextmanager
def run_context(run_id: str) -> Iterator[str]:
    """Tag every log record emitted inside the block with ``run_id``."""
    token = _current_run_id.set(run_id)
    try:
        yield run_id
    finally:
        _current_run_id.reset(token)


class RunContextFilter(logging.Filter):
    """Attach the active curation run id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = _current_run_id.get() or "-"
        return True


class JsonFormatter(logging.Formatter):
    """Render log records as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "run_id": getattr(record, "run_id", None),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _build_formatter(log_format: str) -> logging.Formatter:
    if (log_format or "").strip().lower() == "json":
        return JsonFormatter()
    return logging.Formatter(fmt=_TEXT_FORMAT, datefmt=_DATE_FORMAT)


def configure_structured_logging(level: int = logging.INFO) -> None:
    """Attach structured JSON stdout logging to the root logger (idempotent)."""
    root = logging.getLogger()
    root.setLevel(level)

    has_json_stream = any(
        isinstance(handler, logging.StreamHandler)
        and isinstance(getattr(handler, "formatter", None), JsonFormatter)
        for handler in root.handlers
    )
    if not has_json_stream:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(JsonFormatter())
        stream_handler.addFilter(RunContextFilter())
        root.addHandler(stream_handler)


def configure_logging(log_dir: str, enable_console: bool = False, log_format: str = "text") -> str:
    """
    Configure root logging with:
      - FileHandler (INFO+) to a new file per run: log-YYYY-MM-DD-HH-MM-SS
      - StreamHandler (WARNING+) to stderr when enable_console is set
      - spotipy/urllib3 loggers routed to root at WARNING (no extra console spam)

    Returns the path to the created log file.
    """
    os.makedirs(log_dir, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
    log_path = os.path.join(log_dir, f"log-{timestamp}")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    # Remove existing FileHandlers to avoid duplicates on repeated calls
    root.handlers = [h for h in root.handlers if not isinstance(h, logging.FileHandler)]

    formatter = _build_formatter(log_format)
    context_filter = RunContextFilter()

    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    file_handler.addFilter(context_filter)
    root.addHandler(file_handler)

    if enable_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(context_filter)
        root.addHandler(console_handler)

    for name in ("spotipy", "urllib3"):
        _l = logging.getLogger(name)
        _l.setLevel(logging.WARNING)
        _l.handlers = []
        _l.propagate = True

    return log_path
