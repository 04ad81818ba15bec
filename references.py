from __future__ import annotations
import re
from typing import List

from errors import DuplicateEntryError

REFERENCE_KINDS = ("companies", "agents", "locations", "cities")


def normalize_company(raw: str) -> str:
    return raw.strip().upper()


def normalize_agent(raw: str) -> str:
    """'John Holland' -> 'J.HOLLAND'; names that already carry a dot are only upper-cased."""
    candidate = raw.strip().upper()
    if "." in candidate:
        return candidate
    parts = candidate.split()
    if len(parts) >= 2:
        last = re.sub(r"[^A-Z]", "", "".join(parts[1:]))
        candidate = f"{parts[0][0]}.{last}"
    return candidate


def normalize_entry(kind: str, raw: str) -> str:
    if kind == "companies":
        return normalize_company(raw)
    if kind == "agents":
        return normalize_agent(raw)
    return raw.strip()


def add_reference(existing: List[str], raw: str, kind: str) -> List[str]:
    if kind not in REFERENCE_KINDS:
        raise ValueError(f"Unknown reference list: {kind}")
    if not (raw or "").strip():
        raise ValueError("Name must not be empty.")
    candidate = normalize_entry(kind, raw)
    if any(e.casefold() == candidate.casefold() for e in existing):
        raise DuplicateEntryError(f'"{candidate}" already exists.')
    return sorted([*existing, candidate], key=str.casefold)
