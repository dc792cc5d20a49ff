import base64
import json
from typing import Any, Literal

from pydantic import BaseModel

JSON_MEDIA_TYPE = "application/json"


class ErrorBody(BaseModel):
    error: str
    message: str | None = None


class ResizeResponse(BaseModel):
    status_code: int
    headers: dict[str, str] = {}
    body: str
    is_base64_encoded: bool = False

    @classmethod
    def image(
        cls,
        data: bytes,
        content_type: str,
        cache_control: str,
        cache_status: Literal["HIT", "MISS"],
    ) -> "ResizeResponse":
        return cls(
            status_code=200,
            headers={
                "Content-Type": content_type,
                "Cache-Control": cache_control,
                "X-Cache": cache_status,
            },
            body=base64.b64encode(data).decode(),
            is_base64_encoded=True,
        )

    @classmethod
    def error(cls, status_code: int, error: str, message: str | None = None) -> "ResizeResponse":
        payload = ErrorBody(error=error, message=message).model_dump(exclude_none=True)
        return cls(
            status_code=status_code,
            headers={"Content-Type": JSON_MEDIA_TYPE},
            body=json.dumps(payload),
        )

    @property
    def content(self) -> bytes:
        if self.is_base64_encoded:
            return base64.b64decode(self.body)
        return self.body.encode()

    def to_lambda(self) -> dict[str, Any]:
        """API Gateway proxy integration result."""
        return {
            "statusCode": self.status_code,
            "headers": self.headers,
            "body": self.body,
            "isBase64Encoded": self.is_base64_encoded,
        }
