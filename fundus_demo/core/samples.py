from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

import httpx

from .config import DEFAULT_TIMEOUT
from .types import Sample
from ..utils.errors import ManifestError
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

REQUIRED_FIELDS = ("original_path", "preproc_path", "class_label_remapped")


class SampleProvider:
    """Loads the sample manifest and picks samples from it.

    ``source`` is either a local file path or an ``http(s)://`` URL. Pass a
    seeded ``random.Random`` (or an int seed) as ``rng`` for reproducible picks.
    """

    def __init__(
        self,
        source: str,
        rng: Union[random.Random, int, None] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.source = source
        self.timeout = timeout
        self._transport = transport
        self._rng = rng if isinstance(rng, random.Random) else random.Random(rng)

    async def load(self) -> List[Sample]:
        raw = await self._read()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ManifestError(f"Manifest {self.source} is not valid JSON: {exc}") from exc
        samples = parse_manifest(data)
        LOGGER.info("Loaded %d samples from %s", len(samples), self.source)
        return samples

    def pick_random(self, samples: Sequence[Sample]) -> Optional[Sample]:
        if not samples:
            return None
        return samples[self._rng.randrange(len(samples))]

    async def _read(self) -> str:
        if self.source.startswith(("http://", "https://")):
            try:
                async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                    response = await client.get(self.source)
                    response.raise_for_status()
            except httpx.HTTPError as exc:
                raise ManifestError(f"Could not fetch manifest {self.source}: {exc}") from exc
            return response.text
        try:
            return Path(self.source).read_text(encoding="utf-8")
        except OSError as exc:
            raise ManifestError(f"Could not read manifest {self.source}: {exc}") from exc


def parse_manifest(data: Any) -> List[Sample]:
    if not isinstance(data, list):
        raise ManifestError("Manifest must be a JSON array of samples.")
    samples = []
    for position, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ManifestError(f"Manifest entry {position} is not an object.")
        missing = [name for name in REQUIRED_FIELDS if name not in entry]
        if missing:
            raise ManifestError(f"Manifest entry {position} is missing {', '.join(missing)}.")
        original, preproc, label = (entry[name] for name in REQUIRED_FIELDS)
        if not isinstance(original, str) or not isinstance(preproc, str):
            raise ManifestError(f"Manifest entry {position} has non-string paths.")
        # bool is an int subclass; a true/false label is a schema error.
        if isinstance(label, bool) or not isinstance(label, int):
            raise ManifestError(f"Manifest entry {position} has a non-integer class label.")
        samples.append(Sample(original_path=original, preproc_path=preproc, label=label))
    return samples
