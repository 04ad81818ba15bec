# store.py
"""
Document store access.

``FirestoreStore`` talks to the Cloud Firestore REST API with the signed-in
user's ID token; ``MemoryStore`` keeps documents in a dict for the sample-data
mode. Both expose ``get(path)`` and ``set(path, data, merge=False)`` where
``path`` is a slash-separated document path such as
``freight-data/2025/months/January``.
"""
from __future__ import annotations
import copy
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional
import numpy as np
import requests

from errors import StoreError
from logger import get_logger

log = get_logger("store")

FIRESTORE_URL = "https://firestore.googleapis.com/v1/projects/{project}/databases/(default)/documents"


# ---------- value codec ----------
def encode_value(value: Any) -> Dict[str, Any]:
    if value is None:
        return {"nullValue": None}
    if isinstance(value, (bool, np.bool_)):
        return {"booleanValue": bool(value)}
    if isinstance(value, (int, np.integer)):
        return {"integerValue": str(int(value))}
    if isinstance(value, (float, np.floating)):
        return {"doubleValue": float(value)}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        # naive values are taken as UTC; Firestore wants an explicit offset
        aware = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        return {"timestampValue": aware.astimezone(timezone.utc).isoformat()}
    if isinstance(value, date):
        return {"stringValue": value.isoformat()}
    if isinstance(value, (list, tuple)):
        values = [encode_value(v) for v in value]
        return {"arrayValue": {"values": values} if values else {}}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    raise TypeError(f"Cannot store value of type {type(value).__name__}")


def encode_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    return {str(k): encode_value(v) for k, v in data.items()}


def decode_value(value: Dict[str, Any]) -> Any:
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "stringValue" in value:
        return value["stringValue"]
    if "timestampValue" in value:
        return value["timestampValue"]
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    raise StoreError(f"Unsupported Firestore value: {sorted(value)}")


def decode_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: decode_value(v) for k, v in fields.items()}


# ---------- stores ----------
class FirestoreStore:
    def __init__(self, project_id: str, id_token: str, timeout: float = 30.0,
                 session: Optional[requests.Session] = None):
        self.base_url = FIRESTORE_URL.format(project=project_id)
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {id_token}",
            "Content-Type": "application/json",
        })

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.strip('/')}"

    def _raise_for(self, resp: requests.Response, action: str, path: str) -> None:
        try:
            detail = resp.json().get("error", {}).get("message") or resp.text
        except ValueError:
            detail = resp.text
        log.error("firestore %s failed", action, extra={"extra_data": {"path": path, "status": resp.status_code}})
        raise StoreError(f"{action} {path} failed ({resp.status_code}): {detail}")

    def get(self, path: str) -> Optional[Dict[str, Any]]:
        try:
            resp = self.session.get(self._url(path), timeout=self.timeout)
        except requests.RequestException as e:
            raise StoreError(f"Could not reach the document store: {e}") from e
        if resp.status_code == 404:
            return None
        if resp.status_code >= 400:
            self._raise_for(resp, "read", path)
        log.debug("firestore read", extra={"extra_data": {"path": path}})
        return decode_fields(resp.json().get("fields", {}))

    def set(self, path: str, data: Dict[str, Any], merge: bool = False) -> None:
        params = [("updateMask.fieldPaths", k) for k in data] if merge else None
        try:
            resp = self.session.patch(
                self._url(path),
                params=params,
                json={"fields": encode_fields(data)},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise StoreError(f"Could not reach the document store: {e}") from e
        if resp.status_code >= 400:
            self._raise_for(resp, "write", path)
        log.info("firestore write", extra={"extra_data": {"path": path, "merge": merge, "keys": sorted(data)}})


class MemoryStore:
    def __init__(self, documents: Optional[Dict[str, Dict[str, Any]]] = None):
        self.documents: Dict[str, Dict[str, Any]] = copy.deepcopy(documents or {})

    def get(self, path: str) -> Optional[Dict[str, Any]]:
        doc = self.documents.get(path.strip("/"))
        return copy.deepcopy(doc) if doc is not None else None

    def set(self, path: str, data: Dict[str, Any], merge: bool = False) -> None:
        key = path.strip("/")
        payload = copy.deepcopy(data)
        if merge and key in self.documents:
            self.documents[key].update(payload)
        else:
            self.documents[key] = payload
