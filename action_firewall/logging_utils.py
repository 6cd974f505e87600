"""
Structured event logging that never writes user payloads.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

event_logger = logging.getLogger("action_firewall.events")

# Keys containing any of these fragments are redacted.
SENSITIVE_FIELDS = (
    "password",
    "email_body",
    "body",
    "content",
    "api_key",
    "secret",
    "token",
    "value",
)

MAX_FIELD_LENGTH = 100


def sanitize(data: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in data.items():
        lower_key = key.lower()
        if any(field in lower_key for field in SENSITIVE_FIELDS):
            out[key] = "[REDACTED]"
        elif isinstance(value, str) and len(value) > MAX_FIELD_LENGTH:
            out[key] = value[:MAX_FIELD_LENGTH] + "..."
        else:
            out[key] = value
    return out


def log_event(event: str, level: int = logging.INFO, **data: Any) -> None:
    """Emit one JSON line describing *event*, with sensitive keys redacted."""
    if not event_logger.isEnabledFor(level):
        return
    payload = {"event": event, **sanitize(data), "timestamp": datetime.now(timezone.utc).isoformat()}
    event_logger.log(level, json.dumps(payload, default=str))
