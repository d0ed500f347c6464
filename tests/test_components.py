"""
Tests for display formatting and image helpers
"""
import os

import pytest
from PIL import Image
from pydantic import ValidationError

from fundus_demo.core.config import (
    CLASSES,
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT,
    DISPLAY_SIZE,
    HEALTH_TIMEOUT,
    DemoConfig,
)
from fundus_demo.core.types import Decision, ServerStatus
from fundus_demo.ui.components import (
    format_ground_truth,
    format_latent,
    format_prediction,
    format_probabilities,
    format_status,
    load_display_image,
    placeholder_image,
    resolve_image_path,
)


def test_format_status():
    assert "Ready" in format_status(ServerStatus.READY)
    assert "Error" in format_status(ServerStatus.ERROR)
    assert "Checking" in format_status(ServerStatus.CHECKING)


def test_format_ground_truth():
    assert format_ground_truth(None, CLASSES) == ""
    assert format_ground_truth(1, CLASSES) == "Ground Truth: **Glaucoma**"
    assert "Unknown (9)" in format_ground_truth(9, CLASSES)


def test_format_prediction():
    decision = Decision(index=1, confidence=0.643914)
    text = format_prediction(decision, 12.3456, CLASSES)
    assert text == "Prediction: **Glaucoma** | Confidence: 64.39% | Time: 12.35 ms"
    assert format_prediction(None, None, CLASSES) == ""


def test_format_latent():
    assert format_latent(None) == ""
    assert "Using latent: a.npy" in format_latent("a.npy")


def test_placeholder_image_size():
    image = placeholder_image()
    assert image.size == (DISPLAY_SIZE, DISPLAY_SIZE)
    assert image.getpixel((0, 0)) == (221, 221, 221)


def test_resolve_image_path(tmp_path):
    assert resolve_image_path("https://cdn/a.png", str(tmp_path)) == "https://cdn/a.png"
    assert resolve_image_path("/images/a.png", str(tmp_path)) == os.path.join(str(tmp_path), "images/a.png")


def test_load_display_image_existing_file(tmp_path):
    (tmp_path / "images").mkdir()
    Image.new("RGB", (50, 40), color=(255, 0, 0)).save(tmp_path / "images" / "a.png")
    image = load_display_image("/images/a.png", str(tmp_path))
    assert image.size == (DISPLAY_SIZE, DISPLAY_SIZE)
    assert image.getpixel((10, 10)) == (255, 0, 0)


def test_load_display_image_missing_falls_back_to_placeholder(tmp_path):
    image = load_display_image("/images/missing.png", str(tmp_path))
    assert image.getpixel((0, 0)) == (221, 221, 221)


def test_load_display_image_unreadable_falls_back_to_placeholder(tmp_path):
    (tmp_path / "bad.png").write_bytes(b"not an image")
    image = load_display_image("bad.png", str(tmp_path))
    assert image.getpixel((0, 0)) == (221, 221, 221)


def test_format_prediction_lists_class_probabilities():
    decision = Decision(index=1, confidence=0.6439, probabilities=[0.0871, 0.6439, 0.2369, 0.0321])
    text = format_prediction(decision, 5.0, CLASSES)
    assert text.startswith("Prediction: **Glaucoma** | Confidence: 64.39% | Time: 5.00 ms")
    assert "| Normal | 8.71% |" in text
    assert "| Glaucoma | 64.39% |" in text
    assert "| Myopia | 23.69% |" in text
    assert "| Diabetes | 3.21% |" in text


def test_format_probabilities():
    assert format_probabilities([0.5, 0.5], ("A", "B")) == (
        "| Class | Probability |\n| --- | --- |\n| A | 50.00% |\n| B | 50.00% |"
    )


@pytest.fixture
def clean_env(monkeypatch):
    """Remove FUNDUS_* overrides from the environment"""
    for name in ("API_URL", "MANIFEST", "ASSETS_DIR", "TIMEOUT", "HEALTH_TIMEOUT", "LOG_LEVEL"):
        monkeypatch.delenv(f"FUNDUS_{name}", raising=False)
    return monkeypatch


def test_config_from_env(clean_env):
    clean_env.setenv("FUNDUS_API_URL", "http://localhost:8080/")
    clean_env.setenv("FUNDUS_MANIFEST", "m.json")
    clean_env.setenv("FUNDUS_TIMEOUT", "2.5")
    config = DemoConfig()
    assert config.api_url == "http://localhost:8080"
    assert config.manifest == "m.json"
    assert config.timeout == 2.5
    assert config.health_timeout == HEALTH_TIMEOUT


def test_config_defaults(clean_env):
    config = DemoConfig()
    assert config.api_url == DEFAULT_API_URL
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.log_level == "INFO"


def test_config_ignores_empty_values(clean_env):
    clean_env.setenv("FUNDUS_TIMEOUT", "")
    assert DemoConfig().timeout == DEFAULT_TIMEOUT


def test_config_init_strips_trailing_slash(clean_env):
    assert DemoConfig(api_url="http://example:9000///").api_url == "http://example:9000"


@pytest.mark.parametrize("name", ["FUNDUS_TIMEOUT", "FUNDUS_HEALTH_TIMEOUT"])
@pytest.mark.parametrize("raw", ["abc", "0", "-3"])
def test_config_rejects_bad_timeout(clean_env, name, raw):
    clean_env.setenv(name, raw)
    with pytest.raises(ValidationError):
        DemoConfig()


def test_config_is_frozen(clean_env):
    config = DemoConfig()
    with pytest.raises(ValidationError):
        config.timeout = 1.0
