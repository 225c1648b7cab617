"""Structured log message helpers shared by the store and the HTTP service."""

from __future__ import annotations

import json
import logging
from typing import Mapping, Tuple


def truncate(value: str, limit: int = 64) -> str:
    if len(value) <= limit:
        return value
    half = limit // 2
    return f"{value[:half]}…{value[-half:]}"


def mask_code(code: object) -> str:
    """Hide all but the last two characters of a code."""
    text = str(code)
    if len(text) <= 2:
        return "*" * len(text)
    return "*" * (len(text) - 2) + text[-2:]


def build_payload(req: str | None = None, **fields: object) -> dict[str, object]:
    payload: dict[str, object] = {}
    if req is not None:
        payload["request_id"] = req
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, str):
            payload[key] = truncate(value)
        else:
            payload[key] = value
    return payload


def emit(
    logger: logging.Logger,
    component: str,
    stage_labels: Mapping[str, str],
    event_labels: Mapping[Tuple[str, str], str],
    stage: str,
    event: str,
    req: str | None = None,
    level: int = logging.INFO,
    **fields: object,
) -> None:
    if not logger.isEnabledFor(level):
        return
    stage_label = stage_labels.get(stage, stage.title())
    event_label = event_labels.get((stage, event), event)
    payload = json.dumps(build_payload(req, **fields), indent=2, sort_keys=True)
    logger.log(level, f"[{component}: {stage_label}]: {event_label}\n{payload}")
