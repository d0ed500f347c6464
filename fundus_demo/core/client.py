from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional

import httpx

from .config import DEFAULT_API_URL, DEFAULT_TIMEOUT, HEALTH_TIMEOUT
from .types import InferenceRequest, InferenceResponse, ServerStatus
from ..utils.errors import InferenceError
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

HEALTH_PATH = "/health"
INFERENCE_PATH = "/inference_from_npy"


class InferenceClient:
    """
    Client for the remote inference server.
    Exposes a readiness probe and a single inference call keyed by artifact URL.
    Tracks ``loading`` and ``last_error`` for the caller to mirror into the UI;
    overlapping calls are not queued or rejected here.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        health_timeout: float = HEALTH_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.health_timeout = health_timeout
        self._transport = transport
        self.loading = False
        self.last_error: Optional[str] = None

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=self._transport)

    @contextmanager
    def _in_flight(self) -> Iterator[None]:
        self.loading = True
        try:
            yield
        finally:
            self.loading = False

    async def check_readiness(self) -> ServerStatus:
        try:
            async with self._client(self.health_timeout) as client:
                response = await client.get(HEALTH_PATH)
        except httpx.HTTPError as exc:
            LOGGER.warning("Server health check failed: %s", _describe(exc))
            return ServerStatus.ERROR
        status = ServerStatus.READY if response.is_success else ServerStatus.ERROR
        LOGGER.info("Health check %s returned %s -> %s", self.base_url, response.status_code, status.value)
        return status

    async def run_inference(self, artifact_reference: str) -> List[float]:
        request = InferenceRequest(artifact_reference)
        self.last_error = None
        with self._in_flight():
            try:
                result = await self._post(request)
            except InferenceError as exc:
                self.last_error = str(exc)
                LOGGER.warning("Inference failed for %s: %s", artifact_reference, exc)
                raise
        return result.output

    async def _post(self, request: InferenceRequest) -> InferenceResponse:
        try:
            async with self._client(self.timeout) as client:
                response = await client.post(INFERENCE_PATH, json=request.to_payload())
        except httpx.HTTPError as exc:
            raise InferenceError(f"Could not reach inference server: {_describe(exc)}") from exc
        if not response.is_success:
            raise InferenceError(_error_message(response))
        return _parse_response(response)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {response.status_code}"


def _parse_response(response: httpx.Response) -> InferenceResponse:
    try:
        body = response.json()
    except ValueError as exc:
        raise InferenceError("Malformed response: body is not JSON.") from exc
    if not isinstance(body, dict) or "output" not in body:
        raise InferenceError("Malformed response: missing 'output' field.")
    output = body["output"]
    if not isinstance(output, list) or not all(
        isinstance(value, (int, float)) and not isinstance(value, bool) for value in output
    ):
        raise InferenceError("Malformed response: 'output' must be a list of numbers.")
    try:
        logits = [float(value) for value in output]
    except OverflowError as exc:
        raise InferenceError("Malformed response: 'output' holds a value too large for a float.") from exc
    return InferenceResponse(output=logits)


def _describe(exc: Exception) -> str:
    return str(exc) or exc.__class__.__name__
