"""Append-only audit log of mutating operations (JSONL)."""

from __future__ import annotations

import getpass
import logging
import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

from crafters_common import AuditEvent

from crafters.config import get_settings

log = logging.getLogger(__name__)


def _get_actor() -> str:
    return os.environ.get("CRAFTERS_ACTOR") or getpass.getuser()


def _write_jsonl(path: Path, event: AuditEvent) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a") as f:
        f.write(event.to_jsonl() + "\n")


def log_event(event: AuditEvent) -> None:
    """Append an audit event to the JSONL log."""
    _write_jsonl(get_settings().audit_jsonl_path, event)


def read_events(path: Path | None = None) -> list[AuditEvent]:
    path = path or get_settings().audit_jsonl_path
    if not path.exists():
        return []
    return [
        AuditEvent.model_validate_json(line)
        for line in path.read_text().splitlines()
        if line.strip()
    ]


@contextmanager
def audit(action: str, target: str = "", **params: Any) -> Generator[AuditEvent, None, None]:
    """Context manager that records timing and success/failure."""
    event = AuditEvent(
        actor=_get_actor(),
        action=action,
        target=target,
        params=params,
    )
    start = time.monotonic()
    try:
        yield event
        event.result = "success"
    except Exception as exc:
        event.result = "failure"
        event.error = str(exc)
        raise
    finally:
        event.duration_ms = int((time.monotonic() - start) * 1000)
        try:
            log_event(event)
        except OSError as exc:
            log.warning("Could not write audit event %s: %s", action, exc)
