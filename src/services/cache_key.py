from src.services.validation import ResizeRequest

CACHE_KEY_PREFIX = "resized"


def derive_cache_key(request: ResizeRequest) -> str:
    # The original path is not escaped: the cache namespace mirrors the origin's.
    return f"{CACHE_KEY_PREFIX}/{request.width}x{request.height}/{request.original_path}"
