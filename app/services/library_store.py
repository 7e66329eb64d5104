import asyncio
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import redis.asyncio as redis
from loguru import logger
from pydantic import ValidationError

from app.core.config import settings
from app.models.library import LibraryEntry, LibraryEntryCreate, LibraryEntryUpdate


class StorageUnavailable(Exception):
    """Redis could not be reached, either at connect time or during an operation."""


class DuplicateEntryError(Exception):
    def __init__(self, kitsu_id: str, existing_id: str):
        super().__init__(f"Manga {kitsu_id} is already in the library (entry {existing_id})")
        self.kitsu_id = kitsu_id
        self.existing_id = existing_id


class LibraryStore:
    """
    Redis-backed store for library entries.

    Layout:
      ``<prefix>entry:<id>``   JSON document of one entry
      ``<prefix>scope:<user>`` hash of kitsu_id -> entry id, one per user scope
    """

    KEY_PREFIX = settings.REDIS_LIBRARY_KEY

    def __init__(self, client: redis.Redis | None = None, connect_retries: int | None = None) -> None:
        self._client = client
        self._connect_retries = max(1, connect_retries or settings.REDIS_CONNECT_RETRIES)
        if client is None and not settings.REDIS_URL:
            logger.warning("REDIS_URL is not set. Library storage will fail until a Redis instance is configured.")

    async def _get_client(self) -> redis.Redis:
        if self._client is not None:
            return self._client

        logger.info("Creating shared Redis client")
        client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            encoding="utf-8",
            socket_connect_timeout=5,
            socket_timeout=5,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
            health_check_interval=30,
        )
        for attempt in range(1, self._connect_retries + 1):
            try:
                await client.ping()
                break
            except (redis.RedisError, OSError) as exc:
                if attempt == self._connect_retries:
                    logger.error(f"Redis unreachable after {attempt} attempts: {exc}")
                    await client.aclose()
                    raise StorageUnavailable("Library storage is unavailable") from exc
                wait_time = 0.5 * (2 ** (attempt - 1))
                logger.warning(
                    f"Redis connection failed: {exc}. Retrying in {wait_time}s... "
                    f"(Attempt {attempt}/{self._connect_retries})"
                )
                await asyncio.sleep(wait_time)

        self._client = client
        return client

    async def close(self) -> None:
        """Close the shared Redis client (call on shutdown)."""
        if self._client is None:
            return
        try:
            logger.info("Closing shared Redis client")
            await self._client.aclose()
        except Exception as e:
            logger.debug(f"Silent failure closing redis client: {e}")
        finally:
            self._client = None

    def _entry_key(self, entry_id: str) -> str:
        return f"{self.KEY_PREFIX}entry:{entry_id}"

    def _scope_key(self, user_id: str | None) -> str:
        return f"{self.KEY_PREFIX}scope:{user_id or settings.DEFAULT_USER_SCOPE}"

    @staticmethod
    def _decode(raw: str | None) -> LibraryEntry | None:
        if not raw:
            return None
        try:
            return LibraryEntry.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Skipping unreadable library entry: {e}")
            return None

    async def _save(self, client: redis.Redis, entry: LibraryEntry) -> None:
        await client.set(self._entry_key(entry.id), entry.model_dump_json(by_alias=True))

    @asynccontextmanager
    async def _storage_errors(self, action: str):
        """Report Redis failures after connect as StorageUnavailable."""
        try:
            yield
        except (redis.RedisError, OSError) as exc:
            logger.error(f"Redis {action} failed: {exc}")
            raise StorageUnavailable("Library storage is unavailable") from exc

    async def ping(self) -> bool:
        client = await self._get_client()
        async with self._storage_errors("ping"):
            return bool(await client.ping())

    async def create(self, payload: LibraryEntryCreate) -> LibraryEntry:
        client = await self._get_client()
        entry_id = uuid.uuid4().hex
        scope_key = self._scope_key(payload.user_id)

        async with self._storage_errors("create"):
            # HSETNX keeps one entry per manga per scope
            if not await client.hsetnx(scope_key, payload.kitsu_id, entry_id):
                existing_id = await client.hget(scope_key, payload.kitsu_id)
                raise DuplicateEntryError(payload.kitsu_id, existing_id or "")

            now = datetime.now(timezone.utc)
            entry = LibraryEntry(**payload.model_dump(), id=entry_id, created_at=now, updated_at=now)
            try:
                await self._save(client, entry)
            except Exception:
                # Release the reservation so the manga can be added again
                try:
                    await client.hdel(scope_key, payload.kitsu_id)
                except (redis.RedisError, OSError) as exc:
                    logger.warning(f"Could not release {payload.kitsu_id} in {scope_key}: {exc}")
                raise

        logger.info(f"Added {entry.kitsu_id} ({entry.title!r}) to scope {payload.user_id or 'default'}")
        return entry

    async def list_entries(self, user_id: str | None = None) -> list[LibraryEntry]:
        """All entries of a scope, oldest first."""
        client = await self._get_client()
        async with self._storage_errors("list"):
            entry_ids = await client.hvals(self._scope_key(user_id))
            if not entry_ids:
                return []
            raws = await client.mget([self._entry_key(eid) for eid in entry_ids])

        entries = [entry for entry in (self._decode(raw) for raw in raws) if entry is not None]
        entries.sort(key=lambda e: e.created_at)
        return entries

    async def get(self, entry_id: str) -> LibraryEntry | None:
        client = await self._get_client()
        async with self._storage_errors("get"):
            raw = await client.get(self._entry_key(entry_id))
        return self._decode(raw)

    async def update(self, entry_id: str, changes: LibraryEntryUpdate) -> LibraryEntry | None:
        """Apply the fields present in ``changes``; an explicit null rating clears it."""
        client = await self._get_client()
        async with self._storage_errors("update"):
            entry = self._decode(await client.get(self._entry_key(entry_id)))
            if entry is None:
                return None

            updates = changes.model_dump(exclude_unset=True)
            if updates.get("status") is None:
                updates.pop("status", None)
            updates["updated_at"] = datetime.now(timezone.utc)

            entry = entry.model_copy(update=updates)
            await self._save(client, entry)
        return entry

    async def delete(self, entry_id: str) -> bool:
        client = await self._get_client()
        async with self._storage_errors("delete"):
            entry = self._decode(await client.get(self._entry_key(entry_id)))
            if entry is None:
                return False

            await client.delete(self._entry_key(entry_id))
            scope_key = self._scope_key(entry.user_id)
            if await client.hget(scope_key, entry.kitsu_id) == entry_id:
                await client.hdel(scope_key, entry.kitsu_id)
        logger.info(f"Removed {entry.kitsu_id} from scope {entry.user_id or 'default'}")
        return True


library_store = LibraryStore()
