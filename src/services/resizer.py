import asyncio

import aioboto3
import structlog

from src.config import Settings
from src.core.exceptions import AppError, ClientInputError, ObjectNotFound, OriginNotFound
from src.schemas.resize import ResizeResponse
from src.services.cache_key import derive_cache_key
from src.services.storage import CacheBackend, Hit, ObjectReader, S3ObjectStore, StoreFailure, lookup_cache
from src.services.transform import TransformEngine
from src.services.validation import DEFAULT_MAX_DIMENSION, validate_request

logger = structlog.get_logger()

DEFAULT_CACHE_CONTROL = "public, max-age=31536000"


class ImageResizer:
    """Cache-aside resize pipeline.

    Each ``handle`` call runs validate, derive key, probe cache, fetch origin,
    transform, fill cache, in that order and with no retries. Store clients and
    the transform engine are supplied by the caller.
    """

    def __init__(
        self,
        origin: ObjectReader,
        cache: CacheBackend,
        engine: TransformEngine | None = None,
        max_dimension: int = DEFAULT_MAX_DIMENSION,
        cache_control: str = DEFAULT_CACHE_CONTROL,
    ) -> None:
        self.origin = origin
        self.cache = cache
        self.engine = engine or TransformEngine()
        self.max_dimension = max_dimension
        self.cache_control = cache_control

    async def handle(self, original_path: str | None, width_raw: str | None, height_raw: str | None) -> ResizeResponse:
        try:
            return await self._handle(original_path, width_raw, height_raw)
        except AppError as e:
            if isinstance(e, ClientInputError):
                logger.info("request_rejected", path=original_path, reason=e.detail)
            return ResizeResponse.error(e.status_code, e.detail)
        except Exception as e:
            logger.exception("resize_failed", path=original_path, error=str(e))
            return ResizeResponse.error(500, "Internal server error", message=str(e))

    async def _handle(self, original_path: str | None, width_raw: str | None, height_raw: str | None) -> ResizeResponse:
        request = validate_request(original_path, width_raw, height_raw, max_dimension=self.max_dimension)
        key = derive_cache_key(request)

        lookup = await lookup_cache(self.cache, key)
        if isinstance(lookup, Hit):
            logger.debug("cache_hit", key=key)
            return ResizeResponse.image(lookup.stored.body, lookup.stored.content_type, self.cache_control, "HIT")
        if isinstance(lookup, StoreFailure):
            logger.warning("cache_probe_failed", key=key, error=lookup.reason)
        else:
            logger.debug("cache_miss", key=key)

        try:
            original = await self.origin.get(request.original_path)
        except ObjectNotFound as e:
            logger.info("origin_not_found", path=request.original_path)
            raise OriginNotFound(request.original_path) from e

        resized = await asyncio.to_thread(self.engine.transform, original.body, request.width, request.height)
        logger.info(
            "image_resized",
            key=key,
            source_bytes=len(original.body),
            output_bytes=len(resized.body),
            format=resized.format,
        )

        try:
            await self.cache.put(key, resized.body, resized.content_type, self.cache_control)
        except Exception as e:
            logger.error("cache_write_failed", key=key, error=str(e))

        return ResizeResponse.image(resized.body, resized.content_type, self.cache_control, "MISS")


def build_resizer(settings: Settings, session: aioboto3.Session | None = None) -> ImageResizer:
    session = session or aioboto3.Session(region_name=settings.aws_region)
    origin = S3ObjectStore(session, settings.origin_bucket, settings.aws_region, settings.s3_endpoint_url)
    cache = S3ObjectStore(session, settings.cache_bucket, settings.aws_region, settings.s3_endpoint_url)
    return ImageResizer(
        origin=origin,
        cache=cache,
        engine=TransformEngine(jpeg_quality=settings.jpeg_quality),
        max_dimension=settings.max_dimension,
        cache_control=settings.cache_control,
    )
