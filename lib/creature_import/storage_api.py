# creature_import/storage_api.py
from __future__ import annotations
import json
from typing import Optional, Any, List

import requests
from requests import Response

from creature_import.config import get_storage_api_key
from creature_import.creature import CustomEncoder


class StorageAPI:
    """
    Client for the storage service that keeps imported creatures.

    Endpoints:
      - GET  {base}/v1/creatures/items      -> list of keys or {"items":[...]} or {"data":[...]}
      - GET  {base}/v1/creatures/{key}      -> JSON (raw or {"data": ...})
      - PUT  {base}/v1/creatures/{key}      -> accepts {"data": ...}
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None):
        if not base_url:
            raise ValueError("StorageAPI base_url is required")
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.api_key = get_storage_api_key()

        # attach API key for every request made by this Session
        if self.api_key:
            self.session.headers.update({"X-Api-Key": self.api_key})

    # ----- URL helpers -----

    def _creatures_url(self) -> str:
        return f"{self.base_url}/v1/creatures"

    def _items_url(self) -> str:
        return f"{self._creatures_url()}/items"

    def _item_url(self, key: str) -> str:
        return f"{self._creatures_url()}/{key}"

    # ----- Response helpers -----

    @staticmethod
    def _unwrap_data(maybe_wrapped: Any) -> Any:
        """
        Accept either {"data": ...} or raw payload. Return the inner object.
        """
        if isinstance(maybe_wrapped, dict) and "data" in maybe_wrapped:
            return maybe_wrapped["data"]
        return maybe_wrapped

    @staticmethod
    def _keys_from(payload: Any) -> Optional[List[str]]:
        if isinstance(payload, dict):
            for k in ("items", "keys", "results"):
                if k in payload:
                    payload = payload[k]
                    break
        if not isinstance(payload, list):
            return None
        out: List[str] = []
        for obj in payload:
            if isinstance(obj, str):
                out.append(obj)
            elif isinstance(obj, dict):
                for name_key in ("key", "name", "filename", "id"):
                    if isinstance(obj.get(name_key), str):
                        out.append(obj[name_key])
                        break
        return out

    # ----- Core ops -----

    def list_creature_keys(self) -> List[str]:
        """
        Return the stored creature keys (e.g. ["brook_goblin.json", ...]).
        """
        try:
            r: Response = self.session.get(self._items_url(), timeout=8)
            r.raise_for_status()
            keys = self._keys_from(self._unwrap_data(r.json()))
        except Exception as e:
            raise RuntimeError(f"StorageAPI.list() failed: {e}") from e
        if keys is None:
            raise RuntimeError("StorageAPI.list() failed: unrecognized payload shape")
        return keys

    def get_creature(self, key: str) -> Optional[dict]:
        """
        GET the JSON object for a given key. Returns dict or None if 404.
        """
        try:
            r: Response = self.session.get(self._item_url(key), timeout=8)
            if r.status_code == 404:
                return None
            r.raise_for_status()
            payload = self._unwrap_data(r.json())
            if isinstance(payload, str):
                payload = json.loads(payload)
            return payload if isinstance(payload, dict) else {"value": payload}
        except Exception as e:
            raise RuntimeError(f"StorageAPI.get({key}) failed: {e}") from e

    def save_creature(self, key: str, data: Any) -> None:
        """
        PUT a creature payload under a key. Dataclasses and enums are encoded
        with CustomEncoder first.
        """
        try:
            body = json.loads(json.dumps(data, cls=CustomEncoder, ensure_ascii=False))
            r: Response = self.session.put(self._item_url(key), json={"data": body}, timeout=10)
            r.raise_for_status()
        except Exception as e:
            raise RuntimeError(f"StorageAPI.put({key}) failed: {e}") from e

