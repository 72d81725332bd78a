"""Gradio UI callback tests."""

from __future__ import annotations

import time
from typing import Optional

import pytest
from PIL import Image

from modules.errors import RequestError
from modules.prompts.style_presets import StylePreset, StylePresetRegistry
from modules.ui import callbacks
from modules.ui.controller import InteractionController, OperationState, SessionState
from modules.utils.image_utils import decode_data_url, encode_pil


class DummyImageClient:
    """Return small real PNGs so the preview can be rendered."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, str]] = []
        self.error: Optional[Exception] = None

    def _result(self, kind: str, source: str, prompt: str) -> str:
        self.calls.append((kind, source, prompt))
        if self.error is not None:
            raise self.error
        shade = 40 * len(self.calls) % 256
        return encode_pil(Image.new("RGB", (6, 6), (shade, shade, shade)))

    def generate_or_transform(self, source_image: str, prompt: str) -> str:
        return self._result("generate", source_image, prompt)

    def edit_existing(self, source_image: str, prompt: str) -> str:
        return self._result("edit", source_image, prompt)


@pytest.fixture
def client() -> DummyImageClient:
    return DummyImageClient()


def build_callbacks(client: DummyImageClient, registry: StylePresetRegistry | None = None):
    return callbacks.build_callbacks(InteractionController(client), style_registry=registry)


def test_render_empty_session(client):
    render = build_callbacks(client)["render"]

    preview, counter, caption, gallery, prev_update, next_update = render(SessionState())

    assert preview is None
    assert counter == ""
    assert "will appear here" in caption
    assert gallery == []
    assert prev_update["interactive"] is False
    assert next_update["interactive"] is False


def test_on_upload_stages_data_url(client, tmp_path):
    path = tmp_path / "cat.png"
    Image.new("RGB", (3, 3), (10, 20, 30)).save(path)
    session = SessionState()

    build_callbacks(client)["on_upload"](str(path), session)

    assert session.source_image.startswith("data:image/png;base64,")
    assert decode_data_url(session.source_image) == path.read_bytes()


def test_on_clear_image(client):
    session = SessionState(source_image="data:image/png;base64,AAAA")

    image, state = build_callbacks(client)["on_clear_image"](session)

    assert image is None
    assert state.source_image is None


def test_on_tag_appends_preset_text(client):
    registry = StylePresetRegistry()
    registry.add(StylePreset(name="ghibli", positive="studio ghibli style"))
    cb = build_callbacks(client, registry)["on_tag"]
    session = SessionState()

    prompt, _ = cb("ghibli", "a cat", session)

    assert prompt == "a cat studio ghibli style"
    assert session.prompt == prompt


def test_on_generate_locks_buttons_then_renders(client):
    cb = build_callbacks(client)["on_generate"]
    session = SessionState()

    frames = list(cb(session, "a cat"))

    assert len(frames) == 2
    busy, final = frames
    assert busy[7] == "Generating your image..."
    assert busy[8]["interactive"] is False and busy[9]["interactive"] is False
    state, preview, counter, caption, gallery, prev_update, next_update, status, gen_btn, edit_btn = final
    assert state is session
    assert preview.size == (6, 6)
    assert counter == "1 of 1"
    assert caption == "a cat"
    assert len(gallery) == 1
    assert status.startswith("Image ready")
    assert gen_btn["interactive"] is True and edit_btn["interactive"] is True
    assert session.in_flight is OperationState.IDLE


def test_on_generate_failure_reports_status(client):
    client.error = RequestError("Prompt is required", status_code=400)
    cb = build_callbacks(client)["on_generate"]
    session = SessionState(source_image="data:image/png;base64,AAAA")

    frames = list(cb(session, ""))

    status = frames[-1][7]
    assert "Prompt is required" in status
    assert len(session.history) == 0
    assert frames[-1][8]["interactive"] is True


def test_on_generate_while_busy_is_noop(client):
    cb = build_callbacks(client)["on_generate"]
    session = SessionState()
    session.in_flight = OperationState.EDITING

    frames = list(cb(session, "a cat"))

    assert len(frames) == 1
    assert client.calls == []


def test_on_edit_chains_from_current_result(client):
    cb_map = build_callbacks(client)
    session = SessionState()
    list(cb_map["on_generate"](session, "a cat"))
    first = session.history.current()

    frames = list(cb_map["on_edit"](session, "add rain"))

    assert client.calls[-1] == ("edit", first.result, "add rain")
    assert frames[-1][2] == "1 of 2"


def test_navigation_callbacks(client):
    cb_map = build_callbacks(client)
    session = SessionState()
    for prompt in ("one", "two", "three"):
        list(cb_map["on_generate"](session, prompt))

    frame = cb_map["on_step_backward"](session)
    assert frame[2] == "2 of 3"
    assert frame[3] == "two"

    frame = cb_map["on_jump"](session, 2)
    assert frame[2] == "3 of 3"
    assert frame[5]["interactive"] is False  # no older record
    assert frame[6]["interactive"] is True

    frame = cb_map["on_step_forward"](session)
    assert frame[2] == "2 of 3"

    frame = cb_map["on_jump"](session, 9)
    assert frame[2] == "2 of 3"


def test_on_restore_returns_source_and_prompt(client):
    cb_map = build_callbacks(client)
    source = encode_pil(Image.new("RGB", (5, 4), (1, 2, 3)))
    session = SessionState(source_image=source)
    list(cb_map["on_generate"](session, "restore me"))
    session.source_image = None
    session.prompt = ""

    image, prompt, state = cb_map["on_restore"](session)

    assert image.size == (5, 4)
    assert prompt == "restore me"
    assert state.source_image == source


def test_on_generate_claims_session_before_first_frame(client):
    cb_map = build_callbacks(client)
    session = SessionState()

    running = cb_map["on_generate"](session, "a cat")
    busy = next(running)

    assert busy[7] == "Generating your image..."
    assert session.in_flight is OperationState.GENERATING
    # a second click while the first frame is on screen does nothing
    assert len(list(cb_map["on_edit"](session, "add rain"))) == 1
    assert len(list(cb_map["on_generate"](session, "a dog"))) == 1
    assert client.calls == []

    final = list(running)[-1]
    assert final[7].startswith("Image ready")
    assert client.calls == [("generate", "", "a cat")]
    assert session.in_flight is OperationState.IDLE


def test_abandoned_generate_releases_session(client):
    cb = build_callbacks(client)["on_generate"]
    session = SessionState()

    running = cb(session, "a cat")
    next(running)
    running.close()

    assert session.in_flight is OperationState.IDLE
    assert client.calls == []


def test_gallery_labels_show_creation_time(client):
    cb_map = build_callbacks(client)
    session = SessionState()
    list(cb_map["on_generate"](session, "a cat"))
    record = session.history.current()

    gallery = cb_map["render"](session)[3]

    expected = time.strftime("%Y-%m-%d %H:%M", time.localtime(record.created_at))
    assert gallery[0][1] == f"Generation 1 ({expected}): a cat"
