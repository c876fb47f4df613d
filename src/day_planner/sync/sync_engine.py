# src/day_planner/sync/sync_engine.py

"""
Backup of the task collection to a single private gist.

Three entry points with different failure profiles:
- sync(): fetch -> merge -> publish; a missing backup is tolerated
- pull(): fetch -> replace local state; a missing backup is an error
- push(): publish only

No de-duplication or locking: two concurrent calls are two independent
attempts. Front ends should disable the trigger while one is outstanding.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ..tasks.task_models import TaskCollection
from ..tasks.task_store import TaskStore
from .credentials import CredentialStore
from .errors import BackupNotFoundError, CorruptBackupError, TransportError
from .gist_client import DEFAULT_BASE_URL, GistClient
from .merge import merge_collections

logger = logging.getLogger(__name__)

GIST_DESCRIPTION = "Todo App Data Backup"
GIST_FILENAME = "todo-data.json"


@dataclass(frozen=True, slots=True)
class SyncResult:
    merged: bool  # False when no remote backup existed yet
    added: int
    document_id: str


class RemoteSyncEngine:
    def __init__(
        self,
        store: TaskStore,
        credentials: CredentialStore,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 15.0,
        description: str = GIST_DESCRIPTION,
        filename: str = GIST_FILENAME,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.store = store
        self.credentials = credentials
        self._base_url = base_url
        self._timeout = timeout
        self._description = description
        self._filename = filename
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Any,
        store: TaskStore,
        credentials: CredentialStore,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> RemoteSyncEngine:
        return cls(
            store,
            credentials,
            base_url=getattr(settings, "github_api_url", DEFAULT_BASE_URL),
            timeout=float(getattr(settings, "sync_timeout_seconds", 15.0)),
            description=getattr(settings, "gist_description", GIST_DESCRIPTION),
            filename=getattr(settings, "gist_filename", GIST_FILENAME),
            transport=transport,
        )

    def _open_client(self) -> GistClient:
        # Raises CredentialNotSetError before any network call.
        token = self.credentials.require_token()
        return GistClient(
            token,
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    # ---- primitives ----

    async def locate(self) -> str | None:
        """Find the backup gist and cache its id. None means "no backup yet"."""
        async with self._open_client() as client:
            return await self._locate(client)

    async def fetch(self) -> TaskCollection:
        async with self._open_client() as client:
            return await self._fetch(client)

    async def publish(self) -> str:
        async with self._open_client() as client:
            return await self._publish(client)

    # ---- flows ----

    async def sync(self) -> SyncResult:
        """Fetch, merge into the local store, then publish the merged state."""
        async with self._open_client() as client:
            try:
                remote = await self._fetch(client)
            except BackupNotFoundError:
                logger.info("Sync: no remote backup yet; publishing local state.")
                remote = None

            added = 0
            if remote is not None:
                merged, added = merge_collections(self.store.snapshot(), remote)
                self.store.replace_collection(merged)
                logger.info("Sync: merged remote backup added=%s", added)

            document_id = await self._publish(client)
        return SyncResult(merged=remote is not None, added=added, document_id=document_id)

    async def pull(self) -> TaskCollection:
        """Replace local state with the remote backup. No merge."""
        remote = await self.fetch()
        self.store.replace_collection(remote)
        logger.info("Pull: local state replaced total=%s", self.store.count())
        return remote

    async def push(self) -> str:
        return await self.publish()

    # ---- internals ----

    async def _locate(self, client: GistClient) -> str | None:
        try:
            gists = await client.list_gists()
        except TransportError:
            logger.warning("Locate: listing gists failed; treating as not found.", exc_info=True)
            return None

        for gist in gists:
            files = gist.get("files") or {}
            if gist.get("description") == self._description and self._filename in files:
                gist_id = str(gist["id"])
                self.credentials.document_id = gist_id
                logger.info("Locate: found backup gist id=%s", gist_id)
                return gist_id

        logger.info("Locate: no backup gist found.")
        return None

    async def _fetch(self, client: GistClient) -> TaskCollection:
        gist_id = self.credentials.document_id or await self._locate(client)
        if not gist_id:
            raise BackupNotFoundError()

        gist = await client.get_gist(gist_id)
        entry = (gist.get("files") or {}).get(self._filename) or {}
        content = entry.get("content")
        if not content:
            raise CorruptBackupError("Todo data file not found in gist")

        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise CorruptBackupError(f"Todo data file is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise CorruptBackupError("Todo data file does not hold a task collection")

        try:
            collection = TaskCollection.from_dict(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise CorruptBackupError(f"Todo data file holds a malformed task: {exc}") from exc

        logger.debug("Fetch: downloaded gist id=%s bytes=%s", gist_id, len(content))
        return collection

    async def _publish(self, client: GistClient) -> str:
        gist_id = self.credentials.document_id or await self._locate(client)
        payload = {
            "description": self._description,
            "public": False,
            "files": {
                self._filename: {
                    "content": json.dumps(self.store.snapshot().to_dict(), indent=2),
                }
            },
        }

        if gist_id:
            await client.update_gist(gist_id, payload)
            logger.info("Publish: updated gist id=%s", gist_id)
            return gist_id

        result = await client.create_gist(payload)
        gist_id = str(result["id"])
        self.credentials.document_id = gist_id
        logger.info("Publish: created gist id=%s", gist_id)
        return gist_id
