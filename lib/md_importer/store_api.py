# md_importer/store_api.py
from __future__ import annotations
import asyncio
import re
from typing import Optional, Any, Dict, List

import requests
from requests import Response

from md_importer.config import get_api_key, get_request_timeout
from md_importer.exceptions import StoreError


def spell_key(name: str) -> str:
    """Convert a spell name to its storage key.

    'Fireball'      → 'fireball.json'
    'Magic Missile' → 'magic_missile.json'
    """
    key = name.strip().lower()
    key = re.sub(r"[^a-z0-9]+", "_", key)
    key = key.strip("_")
    return f"{key}.json"


def _unwrap_data(maybe_wrapped: Any) -> Any:
    """
    Accept either {"data": ...} or raw payload. Return the inner object.
    """
    if isinstance(maybe_wrapped, dict) and "data" in maybe_wrapped:
        return maybe_wrapped["data"]
    return maybe_wrapped


def _session_for(session: Optional[requests.Session], api_key: Optional[str]) -> requests.Session:
    session = session or requests.Session()
    # attach API key for every request made by this Session
    if api_key:
        session.headers.update({"X-Api-Key": api_key})
    return session


class StoreAPI:
    """
    Document store client: creates actors and attaches items to them.

    Endpoints:
      - POST {base}/v1/actors                 -> {"id": ...} (raw or {"data": ...})
      - POST {base}/v1/actors/{handle}/items  -> list of created items
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        if not base_url:
            raise ValueError("StoreAPI base_url is required")
        self.base_url = base_url.rstrip("/")
        self.session = _session_for(session, api_key or get_api_key())
        self.timeout = timeout or get_request_timeout()

    # ----- URL helpers -----

    def _actors_url(self) -> str:
        return f"{self.base_url}/v1/actors"

    def _items_url(self, handle: str) -> str:
        return f"{self._actors_url()}/{handle}/items"

    # ----- Core ops -----

    def post_actor(self, actor: Dict[str, Any]) -> str:
        """POST an actor record and return the handle the store assigned."""
        try:
            r: Response = self.session.post(self._actors_url(), json=actor, timeout=self.timeout)
            r.raise_for_status()
            payload = _unwrap_data(r.json())
        except (requests.RequestException, ValueError) as e:
            raise StoreError(f"StoreAPI.post_actor({actor.get('name')}) failed: {e}") from e

        if isinstance(payload, str) and payload:
            return payload
        if isinstance(payload, dict):
            for name_key in ("id", "_id", "handle", "key"):
                if name_key in payload and payload[name_key]:
                    return str(payload[name_key])
        raise StoreError(f"Unrecognized actor payload shape: {str(payload)[:200]}")

    def post_items(self, handle: str, items: List[Dict[str, Any]]) -> List[Any]:
        """POST a batch of item records owned by the actor *handle*."""
        try:
            r: Response = self.session.post(
                self._items_url(handle), json={"items": items}, timeout=self.timeout
            )
            r.raise_for_status()
            payload = _unwrap_data(r.json()) if r.content else []
        except (requests.RequestException, ValueError) as e:
            names = ", ".join(str(i.get("name")) for i in items)
            raise StoreError(f"StoreAPI.post_items({handle}: {names}) failed: {e}") from e

        if isinstance(payload, dict) and "items" in payload:
            payload = payload["items"]
        return payload if isinstance(payload, list) else [payload]

    # ----- Async boundary -----

    async def create_actor(self, actor: Dict[str, Any]) -> str:
        return await asyncio.to_thread(self.post_actor, actor)

    async def create_items(self, handle: str, items: List[Dict[str, Any]]) -> List[Any]:
        return await asyncio.to_thread(self.post_items, handle, items)


class CompendiumAPI:
    """
    Spell compendium client.

      - GET {base}/v1/spells/{key}  -> spell record, 404 when unknown
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        if not base_url:
            raise ValueError("CompendiumAPI base_url is required")
        self.base_url = base_url.rstrip("/")
        self.session = _session_for(session, api_key or get_api_key())
        self.timeout = timeout or get_request_timeout()

    def _spell_url(self, key: str) -> str:
        return f"{self.base_url}/v1/spells/{key}"

    def get_spell(self, name: str) -> Optional[dict]:
        """
        GET the spell record for *name*. Returns dict or None if 404.
        """
        key = spell_key(name)
        try:
            r: Response = self.session.get(self._spell_url(key), timeout=self.timeout)
            if r.status_code == 404:
                return None
            r.raise_for_status()
            payload = _unwrap_data(r.json())
        except (requests.RequestException, ValueError) as e:
            raise StoreError(f"CompendiumAPI.get_spell({key}) failed: {e}") from e
        if isinstance(payload, dict):
            return payload
        return None

    async def find_spell(self, name: str) -> Optional[dict]:
        return await asyncio.to_thread(self.get_spell, name)
