"""
Pytest configuration and fixtures
"""
import json
from typing import Callable, List, Optional

import httpx
import pytest

LOGITS = [1.0, 3.0, 2.0, 0.0]


class FakeServer:
    """In-process stand-in for the inference server, served through httpx.MockTransport."""

    def __init__(self):
        self.health_status = 200
        self.health_error: Optional[Exception] = None
        self.inference: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"output": LOGITS}
        )
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/health":
            if self.health_error is not None:
                raise self.health_error
            return httpx.Response(self.health_status, json={"status": "ok"})
        if request.url.path == "/inference_from_npy" and request.method == "POST":
            return self.inference(request)
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def inference_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/inference_from_npy"]


@pytest.fixture
def fake_server():
    """Fake inference server fixture"""
    return FakeServer()


@pytest.fixture
def manifest_file(tmp_path):
    """Single-sample manifest written to a temp file"""
    path = tmp_path / "test_split_preproc.json"
    path.write_text(
        json.dumps([{"original_path": "a.png", "preproc_path": "a.npy", "class_label_remapped": 1}]),
        encoding="utf-8",
    )
    return str(path)
