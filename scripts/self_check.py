from __future__ import annotations

import asyncio
import os
import sys

from fundus_demo.core.client import InferenceClient
from fundus_demo.core.config import CLASSES, DemoConfig
from fundus_demo.core.samples import SampleProvider
from fundus_demo.core.session import SessionController
from fundus_demo.core.types import ServerStatus
from fundus_demo.utils.logging import configure_logging


async def _run(config: DemoConfig) -> bool:
    is_remote = config.manifest.startswith(("http://", "https://"))
    if not is_remote and not os.path.exists(config.manifest):
        print(f"SKIP: {config.manifest} not found.")
        return True
    controller = SessionController(
        SampleProvider(config.manifest, timeout=config.timeout),
        InferenceClient(config.api_url, timeout=config.timeout, health_timeout=config.health_timeout),
        CLASSES,
    )
    samples = await controller.load_samples()
    if not samples:
        print(f"FAIL: no samples loaded from {config.manifest}.")
        return False
    status = await controller.refresh_status()
    if status is not ServerStatus.READY:
        print(f"FAIL: server {config.api_url} is not ready.")
        return False
    sample = controller.pick_sample()
    decision = await controller.run_inference()
    if decision is None:
        print(f"FAIL: inference on {sample.preproc_path}: {controller.state.last_error}")
        return False
    print(
        f"OK: {sample.preproc_path} -> {CLASSES[decision.index]} "
        f"({decision.confidence:.3f}, truth {controller.label_for(sample.label)}) "
        f"in {controller.state.latency_ms:.2f} ms."
    )
    return True


def main():
    config = DemoConfig()
    configure_logging(config.log_level)
    ok = asyncio.run(_run(config))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
