"""Callback implementations for the Gradio interface."""

from __future__ import annotations

import logging
import time
from typing import Any, Iterator, List, Optional, Tuple

try:
    import gradio as gr
except ImportError:  # pragma: no cover
    gr = None  # type: ignore

from PIL import Image

from modules.errors import ConversionError
from modules.prompts.style_presets import StylePresetRegistry
from modules.ui.controller import InteractionController, Notice, OperationState, SessionState
from modules.utils.image_utils import encode_file, to_pil_image

logger = logging.getLogger(__name__)

READY_MESSAGE = "Ready."
BUSY_MESSAGES = {
    "generate": "Generating your image...",
    "edit": "Editing your image...",
}


def _update(**kwargs: Any) -> Any:
    if gr is None:
        return kwargs
    return gr.update(**kwargs)


def _show(notice: Optional[Notice]) -> str:
    """Raise a toast for ``notice`` and return the status line."""
    if notice is None:
        return READY_MESSAGE
    text = f"{notice.title}: {notice.description}"
    if gr is not None:
        if notice.is_error:
            gr.Warning(text)
        else:
            gr.Info(text)
    return text


def build_callbacks(
    controller: InteractionController,
    style_registry: Optional[StylePresetRegistry] = None,
) -> dict[str, Any]:
    """Return a dictionary of Gradio callback functions."""

    registry = style_registry or StylePresetRegistry.with_defaults()

    def _safe_image(data_url: str, placeholder: bool = False) -> Any:
        try:
            return to_pil_image(data_url)
        except ConversionError as exc:
            logger.warning("Cannot display image: %s", exc)
            return Image.new("RGB", (64, 64)) if placeholder else None

    def render(session: SessionState) -> Tuple[Any, ...]:
        """Preview, counter, caption, thumbnails and arrow states for a session."""
        history = session.history
        record = history.current()
        if record is None:
            return (
                None,
                "",
                "Your Ghibli-inspired creation will appear here",
                [],
                _update(interactive=False),
                _update(interactive=False),
            )

        thumbnails: List[Tuple[Any, str]] = []
        for index, item in enumerate(history):
            created = time.strftime("%Y-%m-%d %H:%M", time.localtime(item.created_at))
            label = f"Generation {index + 1} ({created}): {item.prompt}"
            thumbnails.append((_safe_image(item.result, placeholder=True), label))
        return (
            _safe_image(record.result),
            f"{history.current_index + 1} of {len(history)}",
            record.prompt,
            thumbnails,
            _update(interactive=history.has_older()),
            _update(interactive=history.has_newer()),
        )

    def _buttons(interactive: bool) -> Tuple[Any, Any]:
        return _update(interactive=interactive), _update(interactive=interactive)

    def on_upload(path: Optional[str], session: SessionState) -> SessionState:
        controller.stage_image(session, encode_file(path) if path else None)
        return session

    def on_clear_image(session: SessionState) -> Tuple[None, SessionState]:
        controller.clear_staged_image(session)
        return None, session

    def on_tag(tag_name: str, prompt: str, session: SessionState) -> Tuple[str, SessionState]:
        try:
            text = registry.get(tag_name).text
        except KeyError:
            text = tag_name
        controller.set_prompt(session, prompt)
        return controller.add_tag(session, text), session

    def _run(kind: str, session: SessionState, prompt: str) -> Iterator[Tuple[Any, ...]]:
        state = OperationState.GENERATING if kind == "generate" else OperationState.EDITING
        # claimed before the first yield so a second click sees the session busy
        if not controller.try_begin(session, state):
            yield (session, *(_update() for _ in range(9)))
            return
        try:
            yield (session, *(_update() for _ in range(6)), BUSY_MESSAGES[kind], *_buttons(False))
            if kind == "generate":
                notice = controller.generate(session, prompt, claimed=True)
            else:
                notice = controller.edit(session, prompt, claimed=True)
        finally:
            controller.release(session)
        status = _show(notice)
        yield (session, *render(session), status, *_buttons(True))

    def on_generate(session: SessionState, prompt: str) -> Iterator[Tuple[Any, ...]]:
        yield from _run("generate", session, prompt)

    def on_edit(session: SessionState, prompt: str) -> Iterator[Tuple[Any, ...]]:
        yield from _run("edit", session, prompt)

    def on_step_backward(session: SessionState) -> Tuple[Any, ...]:
        controller.step_backward(session)
        return (session, *render(session))

    def on_step_forward(session: SessionState) -> Tuple[Any, ...]:
        controller.step_forward(session)
        return (session, *render(session))

    def on_jump(session: SessionState, index: Optional[int]) -> Tuple[Any, ...]:
        if index is not None:
            controller.jump_to(session, int(index))
        return (session, *render(session))

    def on_restore(session: SessionState) -> Tuple[Any, str, SessionState]:
        """Put the displayed record's source and prompt back into the inputs."""
        restored = controller.restore(session, session.history.current_index)
        if not restored:
            return _update(), session.prompt, session
        source = _safe_image(session.source_image) if session.source_image else None
        return source, session.prompt, session

    return {
        "render": render,
        "on_upload": on_upload,
        "on_clear_image": on_clear_image,
        "on_tag": on_tag,
        "on_generate": on_generate,
        "on_edit": on_edit,
        "on_step_backward": on_step_backward,
        "on_step_forward": on_step_forward,
        "on_jump": on_jump,
        "on_restore": on_restore,
    }
