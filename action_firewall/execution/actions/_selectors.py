"""Selector helpers shared by the action pipelines."""

import json
import re
from typing import Optional


def css_escape(s: str) -> str:
    return re.sub(r'([!"#$%&\'()*+,./:;<=>?@\[\\\]^`{|}~])', r"\\\1", s)


def quote(s: str) -> str:
    """Quote *s* for use inside a CSS attribute selector or ``:has-text()``."""
    return json.dumps(s)


def compact(label: Optional[str]) -> str:
    """``"First Name"`` -> ``"firstname"``; how forms tend to name fields."""
    return re.sub(r"\s", "", (label or "").lower())
