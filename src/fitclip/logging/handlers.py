"""JSON log formatting for fitclip.

One JSON object per line. Compression runs log their platform, output path
and encode mode as ``extra`` fields; those are promoted to top-level keys so
log processors can filter on them. Job context added by JobContextFilter is
grouped under ``job``. Anything else passed via ``extra`` lands in
``context``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Fields the controller attaches to its run log records
RUN_FIELDS = ("platform", "output_path", "two_pass", "output_size_bytes")

_JOB_FIELDS = {"job_id": "id", "source_path": "source"}

# Attributes every LogRecord carries, plus those filled in by formatters and
# JobContextFilter
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
    "taskName",
    "job_tag",
    *_JOB_FIELDS,
}


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Example output:
        {"timestamp": "...", "level": "INFO", "logger": "fitclip.jobs.controller",
         "message": "Compressing clip.mov for Discord",
         "job": {"id": "a1b2c3d4", "source": "/videos/clip.mov"},
         "platform": "discord", "two_pass": true}
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        job = {
            key: getattr(record, attr)
            for attr, key in _JOB_FIELDS.items()
            if getattr(record, attr, None)
        }
        if job:
            entry["job"] = job

        for field in RUN_FIELDS:
            if hasattr(record, field):
                entry[field] = getattr(record, field)

        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
            and key not in RUN_FIELDS
            and not key.startswith("_")
        }
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
