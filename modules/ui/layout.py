"""Gradio layout: upload + prompt on the left, result history on the right."""

from __future__ import annotations

from pathlib import Path
from typing import Any

try:
    import gradio as gr
except ImportError:  # pragma: no cover
    gr = None  # type: ignore

from config.settings import AppConfig
from modules.prompts.style_presets import StylePresetRegistry
from modules.ui.callbacks import build_callbacks
from modules.ui.controller import InteractionController, SessionState

# Horizontal swipes on the preview press the previous/next buttons.
SWIPE_SCRIPT = """
<script>
(() => {
  let startX = null;
  document.addEventListener("touchstart", (event) => {
    startX = event.target.closest("#result-preview") ? event.touches[0].clientX : null;
  }, { passive: true });
  document.addEventListener("touchend", (event) => {
    if (startX === null) return;
    const dx = event.changedTouches[0].clientX - startX;
    startX = null;
    if (Math.abs(dx) < 50) return;
    const target = document.querySelector(dx < 0 ? "#history-next" : "#history-prev");
    if (target && !target.disabled) target.click();
  }, { passive: true });
})();
</script>
"""


def _load_style_registry(config: AppConfig) -> StylePresetRegistry:
    registry = StylePresetRegistry.with_defaults()
    registry.load_from_file(Path(config.assets_dir) / "styles.json")
    return registry


def build_app(config: AppConfig, controller: InteractionController) -> Any:
    """Compose and return the Gradio application."""
    if gr is None:
        raise RuntimeError("Gradio is not installed; install the project dependencies first.")

    style_registry = _load_style_registry(config)
    callbacks_map = build_callbacks(controller, style_registry=style_registry)

    with gr.Blocks(title="Ghiblify") as demo:
        gr.Markdown("## Ghiblify\nTransform your images with Ghibli magic")
        session = gr.State(SessionState(prompt=config.default_prompt))

        with gr.Row():
            with gr.Column():
                gr.Markdown("### Transform Your Image")
                source_image = gr.Image(label="Source image", type="filepath", height=240)
                prompt = gr.Textbox(
                    label="Prompt",
                    value=config.default_prompt,
                    lines=3,
                    placeholder="Enter your transformation prompt...",
                )
                with gr.Row():
                    generate_btn = gr.Button("Generate", variant="primary")
                    edit_btn = gr.Button("Edit current image")
                    clear_btn = gr.Button("Clear image", variant="stop")

                gr.Markdown("#### Suggested Tags")
                tag_buttons = []
                with gr.Row():
                    for preset in style_registry.list_presets():
                        tag_buttons.append((preset.name, gr.Button(preset.name, size="sm")))
                status = gr.Markdown("Ready.")

            with gr.Column():
                with gr.Row():
                    gr.Markdown("### Generated Image")
                    counter = gr.Markdown("")
                preview = gr.Image(
                    label="Result",
                    type="pil",
                    interactive=False,
                    elem_id="result-preview",
                )
                caption = gr.Markdown("Your Ghibli-inspired creation will appear here")
                with gr.Row():
                    prev_btn = gr.Button("◀ Older", elem_id="history-prev", interactive=False)
                    next_btn = gr.Button("Newer ▶", elem_id="history-next", interactive=False)
                    restore_btn = gr.Button("Reuse source and prompt")
                gallery = gr.Gallery(
                    label="History",
                    columns=6,
                    height=120,
                    allow_preview=False,
                )

        view_outputs = [session, preview, counter, caption, gallery, prev_btn, next_btn]
        action_outputs = [*view_outputs, status, generate_btn, edit_btn]

        source_image.upload(
            fn=callbacks_map["on_upload"],
            inputs=[source_image, session],
            outputs=[session],
        )
        source_image.clear(
            fn=lambda state: callbacks_map["on_clear_image"](state)[1],
            inputs=[session],
            outputs=[session],
        )
        clear_btn.click(
            fn=callbacks_map["on_clear_image"],
            inputs=[session],
            outputs=[source_image, session],
        )

        for tag_name, button in tag_buttons:
            button.click(
                fn=lambda text, state, name=tag_name: callbacks_map["on_tag"](name, text, state),
                inputs=[prompt, session],
                outputs=[prompt, session],
            )

        generate_btn.click(
            fn=callbacks_map["on_generate"],
            inputs=[session, prompt],
            outputs=action_outputs,
        )
        edit_btn.click(
            fn=callbacks_map["on_edit"],
            inputs=[session, prompt],
            outputs=action_outputs,
        )

        prev_btn.click(fn=callbacks_map["on_step_backward"], inputs=[session], outputs=view_outputs)
        next_btn.click(fn=callbacks_map["on_step_forward"], inputs=[session], outputs=view_outputs)

        def on_gallery_select(state: SessionState, evt: gr.SelectData):
            return callbacks_map["on_jump"](state, evt.index)

        gallery.select(fn=on_gallery_select, inputs=[session], outputs=view_outputs)
        restore_btn.click(
            fn=callbacks_map["on_restore"],
            inputs=[session],
            outputs=[source_image, prompt, session],
        )

    return demo
