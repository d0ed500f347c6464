from __future__ import annotations

import time
from typing import List, Optional, Sequence

from .client import InferenceClient
from .config import CLASSES
from .decision import decide
from .samples import SampleProvider
from .types import Decision, Sample, ServerStatus, SessionState
from ..utils.errors import DecisionError, InferenceError, ManifestError
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

NO_SAMPLES = "No samples available."
SELECT_FIRST = "Please select an image first."
SERVER_NOT_READY = "Server is not ready. Please try again later."
ALREADY_RUNNING = "Inference is already running."


class SessionController:
    """Owns the SessionState for one interactive session.

    All transitions go through the methods below; errors from the provider,
    client and decision engine are recovered here and recorded on the state.
    """

    def __init__(
        self,
        provider: SampleProvider,
        client: InferenceClient,
        classes: Sequence[str] = CLASSES,
    ):
        self.provider = provider
        self.client = client
        self.classes = tuple(classes)
        self.samples: List[Sample] = []
        self.state = SessionState()

    @property
    def can_pick(self) -> bool:
        return bool(self.samples)

    @property
    def can_run(self) -> bool:
        return (
            self.state.sample is not None
            and self.state.server_status is ServerStatus.READY
            and not self.state.in_flight
            and not self.client.loading
        )

    async def load_samples(self) -> List[Sample]:
        try:
            self.samples = await self.provider.load()
        except ManifestError as exc:
            LOGGER.error("Failed to load sample manifest: %s", exc)
            self.samples = []
        return self.samples

    async def refresh_status(self) -> ServerStatus:
        self.state.server_status = ServerStatus.CHECKING
        self.state.notice = None
        self.state.server_status = await self.client.check_readiness()
        return self.state.server_status

    def pick_sample(self) -> Optional[Sample]:
        sample = self.provider.pick_random(self.samples)
        if sample is None:
            self.state.notice = NO_SAMPLES
            return None
        self.state.sample = sample
        self.state.decision = None
        self.state.latency_ms = None
        self.state.last_error = None
        self.state.notice = None
        return sample

    async def run_inference(self) -> Optional[Decision]:
        rejection = self._rejection()
        if rejection is not None:
            self.state.notice = rejection
            return None

        sample = self.state.sample
        self.state.decision = None
        self.state.latency_ms = None
        self.state.last_error = None
        self.state.notice = None
        self.state.in_flight = True
        LOGGER.info("Running inference on %s", sample.preproc_path)
        start = time.perf_counter()
        try:
            output = await self.client.run_inference(sample.preproc_path)
            decision = decide(output, self.classes)
        except (InferenceError, DecisionError) as exc:
            self.state.last_error = str(exc)
            LOGGER.warning("Inference on %s failed: %s", sample.preproc_path, exc)
            return None
        finally:
            self.state.in_flight = False
        # Elapsed time covers the round trip plus parsing and softmax.
        self.state.latency_ms = (time.perf_counter() - start) * 1000.0
        self.state.decision = decision
        LOGGER.info(
            "Predicted %s (%.4f) in %.2f ms",
            self.classes[decision.index],
            decision.confidence,
            self.state.latency_ms,
        )
        return decision

    def _rejection(self) -> Optional[str]:
        if self.state.sample is None:
            return SELECT_FIRST
        if self.state.server_status is not ServerStatus.READY:
            return SERVER_NOT_READY
        if self.state.in_flight or self.client.loading:
            return ALREADY_RUNNING
        return None

    def label_for(self, index: int) -> str:
        if 0 <= index < len(self.classes):
            return self.classes[index]
        return f"Unknown ({index})"
