from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ServerStatus(str, Enum):
    CHECKING = "checking"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class Sample:
    original_path: str
    preproc_path: str
    label: int


@dataclass(frozen=True)
class InferenceRequest:
    artifact_reference: str

    def to_payload(self) -> Dict[str, Any]:
        return {"npy_url": self.artifact_reference}


@dataclass(frozen=True)
class InferenceResponse:
    output: List[float]


@dataclass(frozen=True)
class Decision:
    index: int
    confidence: float
    probabilities: List[float] = field(default_factory=list)


@dataclass
class SessionState:
    sample: Optional[Sample] = None
    server_status: ServerStatus = ServerStatus.CHECKING
    decision: Optional[Decision] = None
    latency_ms: Optional[float] = None
    in_flight: bool = False
    last_error: Optional[str] = None
    notice: Optional[str] = None
