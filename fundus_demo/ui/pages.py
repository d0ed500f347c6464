from __future__ import annotations

from functools import partial
from typing import Optional

import gradio as gr

from ..core.config import DISPLAY_SIZE, DemoConfig
from ..core.types import ServerStatus
from .components import (
    format_ground_truth,
    format_latent,
    format_prediction,
    format_status,
    load_display_image,
)
from .state import AppState, create_app_state
from ..utils.errors import friendly_error
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

RUN_LABEL = "Run Inference"
RUNNING_LABEL = "Running Inference..."


def build_app(config: Optional[DemoConfig] = None):
    config = config or DemoConfig()
    with gr.Blocks(title="Fundus Classification Demo") as demo:
        gr.Markdown("# Fundus Classification Demo")
        gr.Markdown("Pick a random fundus image and classify its preprocessed latent on the remote inference server.")

        app_state = gr.State(None)
        with gr.Row():
            status_md = gr.Markdown(_checking_status())
            refresh_btn = gr.Button("Refresh status", size="sm")
        error_md = gr.Markdown("")

        with gr.Row():
            pick_btn = gr.Button("Pick Random Image", interactive=False)
            run_btn = gr.Button(RUN_LABEL, variant="primary", interactive=False)

        image = gr.Image(label="Selected Image", width=DISPLAY_SIZE, height=DISPLAY_SIZE, interactive=False)
        latent_md = gr.Markdown("")
        gt_md = gr.Markdown("")
        pred_md = gr.Markdown("")

        outputs = [app_state, status_md, error_md, pick_btn, run_btn, image, latent_md, gt_md, pred_md]
        demo.load(fn=partial(_on_load, config), inputs=[app_state], outputs=outputs)
        refresh_btn.click(fn=_on_refresh, inputs=[app_state], outputs=outputs)
        pick_btn.click(fn=_on_pick, inputs=[app_state], outputs=outputs)
        run_btn.click(fn=_on_run, inputs=[app_state], outputs=outputs)

    return demo


def _checking_status() -> str:
    return format_status(ServerStatus.CHECKING)


async def _on_load(config: DemoConfig, app_state: Optional[AppState]):
    if app_state is None:
        app_state = create_app_state(config)
    controller = app_state.controller
    await controller.load_samples()
    await controller.refresh_status()
    return _render(app_state)


async def _on_refresh(app_state: Optional[AppState]):
    if app_state is None:
        return _render(app_state)
    await app_state.controller.refresh_status()
    return _render(app_state)


def _on_pick(app_state: Optional[AppState]):
    if app_state is None:
        return _render(app_state)
    app_state.controller.pick_sample()
    _warn(app_state)
    return _render(app_state)


async def _on_run(app_state: Optional[AppState]):
    if app_state is None:
        yield _render(app_state)
        return
    controller = app_state.controller
    if not controller.can_run:
        await controller.run_inference()
        _warn(app_state)
        yield _render(app_state)
        return
    yield _render(app_state, running=True)
    try:
        await controller.run_inference()
    except Exception as exc:
        LOGGER.exception("Unexpected failure while running inference")
        controller.state.last_error = f"Unexpected error: {exc}"
    yield _render(app_state)


def _warn(app_state: AppState) -> None:
    notice = app_state.controller.state.notice
    if notice:
        gr.Warning(notice)


def _render(app_state: Optional[AppState], running: bool = False):
    if app_state is None:
        return (
            app_state,
            _checking_status(),
            "",
            gr.update(interactive=False),
            gr.update(value=RUN_LABEL, interactive=False),
            None,
            "",
            "",
            "",
        )
    controller = app_state.controller
    state = controller.state
    sample = state.sample
    error = f"<span style='color: red'>Inference {friendly_error(state.last_error)}</span>" if state.last_error else ""
    if running:
        run_update = gr.update(value=RUNNING_LABEL, interactive=False)
    else:
        run_update = gr.update(value=RUN_LABEL, interactive=controller.can_run)
    if not controller.can_pick:
        error = error or friendly_error("No samples available. Check the sample manifest.")
    return (
        app_state,
        format_status(state.server_status),
        error,
        gr.update(interactive=controller.can_pick and not running),
        run_update,
        load_display_image(sample.original_path, app_state.config.assets_dir) if sample else None,
        format_latent(sample.preproc_path if sample else None),
        format_ground_truth(sample.label if sample else None, controller.classes),
        "" if running else format_prediction(state.decision, state.latency_ms, controller.classes),
    )
