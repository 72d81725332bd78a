"""Session state and the generate/edit state machine behind the UI."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol

from config.settings import DEFAULT_PROMPT
from modules.errors import ConversionError, ImageClientError
from modules.prompts.style_presets import append_tag
from modules.services.history_service import GenerationHistory

logger = logging.getLogger(__name__)


class OperationState(str, Enum):
    """What the session is currently waiting on."""

    IDLE = "idle"
    GENERATING = "generating"
    EDITING = "editing"


class ImageOperations(Protocol):
    def generate_or_transform(self, source_image: str, prompt: str) -> str: ...

    def edit_existing(self, source_image: str, prompt: str) -> str: ...


@dataclass(slots=True)
class Notice:
    """A message for the user, shown as a toast."""

    title: str
    description: str
    level: str = "info"

    @property
    def is_error(self) -> bool:
        return self.level == "error"


@dataclass
class SessionState:
    """Everything one browser tab knows about."""

    source_image: Optional[str] = None
    prompt: str = DEFAULT_PROMPT
    history: GenerationHistory = field(default_factory=GenerationHistory)
    in_flight: OperationState = OperationState.IDLE

    @property
    def busy(self) -> bool:
        return self.in_flight is not OperationState.IDLE


class InteractionController:
    """Run user intents against the image client and the session history.

    Only one generate or edit may be in flight per session; a second request
    while busy returns None without touching the network. Every failure is
    turned into an error ``Notice`` and the session always returns to idle.
    """

    def __init__(self, client: ImageOperations) -> None:
        self.client = client
        self._gate = threading.Lock()

    def try_begin(self, session: SessionState, state: OperationState) -> bool:
        """Claim the session for ``state``; False when something is already running."""
        with self._gate:
            if session.busy:
                return False
            session.in_flight = state
            return True

    def release(self, session: SessionState) -> None:
        session.in_flight = OperationState.IDLE

    def stage_image(self, session: SessionState, data_url: Optional[str]) -> None:
        session.source_image = data_url or None

    def clear_staged_image(self, session: SessionState) -> None:
        session.source_image = None

    def set_prompt(self, session: SessionState, prompt: Optional[str]) -> None:
        session.prompt = prompt or ""

    def add_tag(self, session: SessionState, tag: str) -> str:
        session.prompt = append_tag(session.prompt, tag)
        return session.prompt

    def generate(
        self,
        session: SessionState,
        prompt: Optional[str] = None,
        claimed: bool = False,
    ) -> Optional[Notice]:
        """Generate from the staged image and/or prompt and record the result.

        ``claimed`` means the caller already won ``try_begin`` for this call.
        """
        if not claimed and not self.try_begin(session, OperationState.GENERATING):
            return None
        try:
            if prompt is not None:
                self.set_prompt(session, prompt)
            text = session.prompt
            source = session.source_image or ""
            if not text.strip() and not source:
                return Notice(
                    "Nothing to generate",
                    "Please upload an image or enter a prompt first",
                    level="error",
                )

            result = self.client.generate_or_transform(source, text)
            session.history.record_result(source, result, text)
        except (ImageClientError, ConversionError) as exc:
            logger.warning("Generation failed: %s", exc)
            return Notice("Generation failed", exc.message, level="error")
        finally:
            self.release(session)
        return Notice("Image ready", "Your new image has been added to the history")

    def edit(
        self,
        session: SessionState,
        prompt: Optional[str] = None,
        claimed: bool = False,
    ) -> Optional[Notice]:
        """Edit the displayed result with the prompt and record the outcome."""
        if not claimed and not self.try_begin(session, OperationState.EDITING):
            return None
        try:
            if prompt is not None:
                self.set_prompt(session, prompt)
            record = session.history.current()
            if record is None:
                return Notice("No image to edit", "Generate an image first", level="error")
            text = session.prompt
            if not text.strip():
                return Notice(
                    "Empty prompt",
                    "Please enter a prompt describing the edit",
                    level="error",
                )

            result = self.client.edit_existing(record.result, text)
            session.history.record_result(record.result, result, text)
        except (ImageClientError, ConversionError) as exc:
            logger.warning("Edit failed: %s", exc)
            return Notice("Edit failed", exc.message, level="error")
        finally:
            self.release(session)
        return Notice("Edit ready", "The edited image has been added to the history")

    def restore(self, session: SessionState, index: int) -> bool:
        """Load a past record's source and prompt back into the staging area."""
        if not 0 <= index < len(session.history):
            return False
        record = session.history.records[index]
        session.source_image = record.source or None
        session.prompt = record.prompt
        return True

    def step_backward(self, session: SessionState) -> None:
        session.history.step_backward()

    def step_forward(self, session: SessionState) -> None:
        session.history.step_forward()

    def jump_to(self, session: SessionState, index: int) -> None:
        session.history.jump_to(index)
