SUPPORTED_FORMATS_LABEL = "jpg, png, webp"


class AppError(Exception):
    """Error whose detail is safe to show to the caller."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class ClientInputError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(status_code=400, detail=detail)


class MissingPath(ClientInputError):
    def __init__(self) -> None:
        super().__init__("Image path is required")


class NoDimensionSpecified(ClientInputError):
    def __init__(self) -> None:
        super().__init__("Width or height must be specified")


class DimensionTooLarge(ClientInputError):
    def __init__(self, max_dimension: int) -> None:
        super().__init__(f"Maximum dimension is {max_dimension}px")
        self.max_dimension = max_dimension


class UnsupportedFormat(ClientInputError):
    def __init__(self, detected: str | None) -> None:
        super().__init__(f"Unsupported image format. Supported: {SUPPORTED_FORMATS_LABEL}")
        self.detected = detected


class OriginNotFound(AppError):
    def __init__(self, path: str) -> None:
        super().__init__(status_code=404, detail="Image not found")
        self.path = path


class StoreError(Exception):
    """Failure talking to an object store."""


class ObjectNotFound(StoreError):
    def __init__(self, bucket: str, key: str) -> None:
        super().__init__(f"Object not found: s3://{bucket}/{key}")
        self.bucket = bucket
        self.key = key


class CacheWriteError(StoreError):
    pass


class CodecError(Exception):
    """Image bytes could not be decoded or encoded."""
