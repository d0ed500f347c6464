from __future__ import annotations

from dataclasses import dataclass

from ..core.client import InferenceClient
from ..core.config import CLASSES, DemoConfig
from ..core.samples import SampleProvider
from ..core.session import SessionController


@dataclass
class AppState:
    config: DemoConfig
    controller: SessionController


def create_app_state(config: DemoConfig) -> AppState:
    provider = SampleProvider(config.manifest, timeout=config.timeout)
    client = InferenceClient(
        config.api_url,
        timeout=config.timeout,
        health_timeout=config.health_timeout,
    )
    return AppState(config=config, controller=SessionController(provider, client, CLASSES))
