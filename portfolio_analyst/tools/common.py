"""Shared tool-layer helpers."""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass


def dump_payload(payload: object) -> str:
    if is_dataclass(payload) and not isinstance(payload, type):
        payload = asdict(payload)
    return json.dumps(payload, ensure_ascii=True)


def ensure_choice(value: str, choices: dict[str, object] | tuple[str, ...], label: str) -> str:
    clean = value.strip().lower()
    options = {str(option).lower() for option in choices}
    if clean not in options:
        raise ValueError(f"Unknown {label} '{value}'. Expected one of {sorted(options)}.")
    return clean
