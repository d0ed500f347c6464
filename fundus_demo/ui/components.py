from __future__ import annotations

import os
from typing import Optional, Sequence, Union

from PIL import Image, ImageDraw

from ..core.config import DISPLAY_SIZE
from ..core.types import Decision, ServerStatus

STATUS_LABELS = {
    ServerStatus.CHECKING: "⏳ Checking...",
    ServerStatus.READY: "✅ Ready",
    ServerStatus.ERROR: "❌ Error",
}


def placeholder_image(size: int = DISPLAY_SIZE, text: str = "Image not found") -> Image.Image:
    image = Image.new("RGB", (size, size), color=(221, 221, 221))
    draw = ImageDraw.Draw(image)
    left, top, right, bottom = draw.textbbox((0, 0), text)
    position = ((size - (right - left)) // 2, (size - (bottom - top)) // 2)
    draw.text(position, text, fill=(102, 102, 102))
    return image


def resolve_image_path(original_path: str, assets_dir: str) -> str:
    if original_path.startswith(("http://", "https://")):
        return original_path
    return os.path.join(assets_dir, original_path.lstrip("/\\"))


def load_display_image(original_path: str, assets_dir: str, size: int = DISPLAY_SIZE) -> Union[Image.Image, str]:
    """Returns a resized PIL image, the URL itself for remote images, or a placeholder."""
    path = resolve_image_path(original_path, assets_dir)
    if path.startswith(("http://", "https://")):
        return path
    try:
        with Image.open(path) as image:
            return image.convert("RGB").resize((size, size))
    except (OSError, ValueError):
        return placeholder_image(size)


def format_status(status: ServerStatus) -> str:
    return f"**Inference Server Status:** {STATUS_LABELS[status]}"


def format_ground_truth(label: Optional[int], classes: Sequence[str]) -> str:
    if label is None:
        return ""
    name = classes[label] if 0 <= label < len(classes) else f"Unknown ({label})"
    return f"Ground Truth: **{name}**"


def format_prediction(decision: Optional[Decision], latency_ms: Optional[float], classes: Sequence[str]) -> str:
    if decision is None:
        return ""
    timing = f"{latency_ms:.2f} ms" if latency_ms is not None else "n/a"
    text = (
        f"Prediction: **{classes[decision.index]}** "
        f"| Confidence: {decision.confidence * 100:.2f}% "
        f"| Time: {timing}"
    )
    if decision.probabilities:
        text += "\n\n" + format_probabilities(decision.probabilities, classes)
    return text


def format_probabilities(probabilities: Sequence[float], classes: Sequence[str]) -> str:
    rows = "\n".join(f"| {name} | {prob * 100:.2f}% |" for name, prob in zip(classes, probabilities))
    return "| Class | Probability |\n| --- | --- |\n" + rows


def format_latent(preproc_path: Optional[str]) -> str:
    if not preproc_path:
        return ""
    return f"<small>Using latent: {preproc_path}</small>"
