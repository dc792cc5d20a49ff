from contextlib import AsyncExitStack, nullcontext
from dataclasses import dataclass
from typing import Protocol

import aioboto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from src.core.exceptions import CacheWriteError, ObjectNotFound, StoreError

logger = structlog.get_logger()

DEFAULT_CONTENT_TYPE = "image/jpeg"

_NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")


@dataclass(frozen=True)
class StoredObject:
    body: bytes
    content_type: str


class ObjectReader(Protocol):
    async def get(self, key: str) -> StoredObject: ...


class CacheBackend(ObjectReader, Protocol):
    async def exists(self, key: str) -> bool: ...

    async def put(self, key: str, body: bytes, content_type: str, cache_control: str) -> None: ...


@dataclass(frozen=True)
class Hit:
    stored: StoredObject


@dataclass(frozen=True)
class Miss:
    pass


@dataclass(frozen=True)
class StoreFailure:
    reason: str


CacheLookup = Hit | Miss | StoreFailure


def _is_not_found(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code", "") in _NOT_FOUND_CODES


class S3ObjectStore:
    """One S3 bucket seen as a key/value blob store.

    Without ``connect`` a client is opened per operation from the shared
    ``aioboto3.Session``. After ``connect`` every operation reuses one client
    until the owning exit stack closes.
    """

    def __init__(
        self,
        session: aioboto3.Session,
        bucket: str,
        region_name: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        self._session = session
        self.bucket = bucket
        self._region_name = region_name
        self._endpoint_url = endpoint_url
        self._shared_client = None

    async def connect(self, stack: AsyncExitStack) -> None:
        self._shared_client = await stack.enter_async_context(self._new_client())
        stack.callback(self._release)

    def _release(self) -> None:
        self._shared_client = None

    def _new_client(self):
        return self._session.client("s3", region_name=self._region_name, endpoint_url=self._endpoint_url)

    def _client(self):
        if self._shared_client is not None:
            return nullcontext(self._shared_client)
        return self._new_client()

    async def exists(self, key: str) -> bool:
        try:
            async with self._client() as s3:
                await s3.head_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            if _is_not_found(exc):
                return False
            raise StoreError(f"head_object failed for s3://{self.bucket}/{key}: {exc}") from exc
        except BotoCoreError as exc:
            raise StoreError(f"head_object failed for s3://{self.bucket}/{key}: {exc}") from exc
        return True

    async def get(self, key: str) -> StoredObject:
        try:
            async with self._client() as s3:
                response = await s3.get_object(Bucket=self.bucket, Key=key)
                body = await response["Body"].read()
        except ClientError as exc:
            if _is_not_found(exc):
                raise ObjectNotFound(self.bucket, key) from exc
            raise StoreError(f"get_object failed for s3://{self.bucket}/{key}: {exc}") from exc
        except BotoCoreError as exc:
            raise StoreError(f"get_object failed for s3://{self.bucket}/{key}: {exc}") from exc
        return StoredObject(body=body, content_type=response.get("ContentType") or DEFAULT_CONTENT_TYPE)

    async def put(self, key: str, body: bytes, content_type: str, cache_control: str) -> None:
        try:
            async with self._client() as s3:
                await s3.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=body,
                    ContentType=content_type,
                    CacheControl=cache_control,
                )
        except (BotoCoreError, ClientError) as exc:
            raise CacheWriteError(f"put_object failed for s3://{self.bucket}/{key}: {exc}") from exc


async def lookup_cache(store: CacheBackend, key: str) -> CacheLookup:
    """Probe the cache with an existence check followed by a fetch.

    The two calls are not atomic: an entry evicted or overwritten between them
    shows up as ``ObjectNotFound`` from ``get`` and is reported as a miss.
    """
    try:
        if not await store.exists(key):
            return Miss()
        stored = await store.get(key)
    except ObjectNotFound:
        return Miss()
    except StoreError as exc:
        return StoreFailure(reason=str(exc))
    return Hit(stored=stored)
