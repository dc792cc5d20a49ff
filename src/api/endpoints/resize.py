from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from src.services.resizer import ImageResizer

router = APIRouter(prefix="/resize")


def get_resizer(request: Request) -> ImageResizer:
    return request.app.state.resizer


@router.get("/{path:path}")
async def resize_image(
    path: str,
    width: str | None = None,
    height: str | None = None,
    resizer: ImageResizer = Depends(get_resizer),
) -> Response:
    result = await resizer.handle(path, width, height)
    headers = {k: v for k, v in result.headers.items() if k.lower() != "content-type"}
    return Response(
        content=result.content,
        status_code=result.status_code,
        headers=headers,
        media_type=result.headers.get("Content-Type"),
    )
