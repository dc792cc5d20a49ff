import base64
import json
from io import BytesIO

from PIL import Image

from src import lambda_handler
from src.services.resizer import ImageResizer

from tests.fakes import FakeObjectStore


def _make_test_image(width: int = 100, height: int = 100) -> bytes:
    img = Image.new("RGB", (width, height), color="red")
    buffer = BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()


class TestExtractPath:
    def test_proxy_parameter(self) -> None:
        event = {"pathParameters": {"proxy": "photos/cat.jpg"}, "path": "/resize/ignored.jpg"}
        assert lambda_handler.extract_path(event) == "photos/cat.jpg"

    def test_falls_back_to_path(self) -> None:
        event = {"pathParameters": None, "path": "/resize/photos/cat.jpg"}
        assert lambda_handler.extract_path(event) == "photos/cat.jpg"

    def test_only_first_prefix_removed(self) -> None:
        event = {"path": "/resize/a/resize/b.jpg"}
        assert lambda_handler.extract_path(event) == "a/resize/b.jpg"

    def test_empty_event(self) -> None:
        assert lambda_handler.extract_path({}) == ""


class TestHandler:
    def test_returns_proxy_result(self, resizer: ImageResizer, origin_store: FakeObjectStore) -> None:
        origin_store.add("cat.jpg", _make_test_image(400, 200))
        event = {"pathParameters": {"proxy": "cat.jpg"}, "queryStringParameters": {"width": "100"}}

        result = lambda_handler.handler(event, None, resizer=resizer)

        assert result["statusCode"] == 200
        assert result["isBase64Encoded"] is True
        assert result["headers"]["X-Cache"] == "MISS"
        img = Image.open(BytesIO(base64.b64decode(result["body"])))
        assert img.size == (100, 50)

    def test_null_query_parameters(self, resizer: ImageResizer) -> None:
        event = {"pathParameters": {"proxy": "cat.jpg"}, "queryStringParameters": None}
        result = lambda_handler.handler(event, None, resizer=resizer)
        assert result["statusCode"] == 400
        assert result["isBase64Encoded"] is False
        assert json.loads(result["body"]) == {"error": "Width or height must be specified"}
