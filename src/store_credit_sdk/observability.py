from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any


def log_operation(
    logger: logging.Logger,
    module: str,
    action: str,
    trace_id: str | None,
    outcome: str,
    **context: Any,
) -> None:
    record: dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "module": module,
        "action": action,
        "trace_id": trace_id,
        "outcome": outcome,
    }
    record.update({key: value for key, value in context.items() if value is not None})
    level = logging.INFO if outcome == "success" else logging.WARNING
    logger.log(level, json.dumps(record, default=str, sort_keys=True))
