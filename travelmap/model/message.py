"""Message - User-facing messages emitted by the render engine.

Architecture:
- render_error channel: RenderErrorMessage subclasses, shown under the map by the host UI
- diagnostic channel: InvalidItemMessage, logged and optionally listed by the host UI

Design Principles:
- Messages are frozen values; the engine never renders them itself
- recoverable=True means the engine retries on the next input change
- recoverable=False means the host should offer a reload
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class MessageLevel(Enum):
    """Display level for UI messages."""

    INFO = "info"  # Blue - diagnostics
    WARNING = "warning"  # Yellow - recoverable faults
    ERROR = "error"  # Red - fatal faults


@dataclass(frozen=True)
class Message(ABC):
    """Abstract base class for engine messages."""

    @property
    @abstractmethod
    def message(self) -> str:
        """Formatted message for display."""
        raise NotImplementedError

    @property
    @abstractmethod
    def level(self) -> MessageLevel:
        """Display level."""
        raise NotImplementedError

    def display(self) -> None:
        """Render this message using the appropriate Streamlit function."""
        import streamlit as st

        render_fn = {
            MessageLevel.INFO: st.info,
            MessageLevel.WARNING: st.warning,
            MessageLevel.ERROR: st.error,
        }[self.level]
        render_fn(self.message)

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class RenderErrorMessage(Message):
    """Base class for messages on the render_error channel."""

    @property
    @abstractmethod
    def recoverable(self) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class HostMapUnavailableMessage(RenderErrorMessage):
    """The map container went away; rendering resumes on the next change."""

    detail: str

    @property
    def recoverable(self) -> bool:
        return True

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.WARNING

    @property
    def message(self) -> str:
        return f"Map unavailable: {self.detail}. It will be redrawn on the next change."


@dataclass(frozen=True)
class RenderFailedMessage(RenderErrorMessage):
    """An engine invariant was violated; the render pass was aborted."""

    error_type: str
    detail: str

    @property
    def recoverable(self) -> bool:
        return False

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.ERROR

    @property
    def message(self) -> str:
        return f"Map rendering failed ({self.error_type}): {self.detail}. Reload to try again."


@dataclass(frozen=True)
class InvalidItemMessage(Message):
    """A trip item was skipped because its data is unusable."""

    item_id: str | None
    reason: str

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.INFO

    @property
    def message(self) -> str:
        item = self.item_id if self.item_id is not None else "Unknown item"
        return f"Skipped {item}: {self.reason}"

    def log(self) -> None:
        logging.getLogger(__name__).warning(f"[INPUT] {self.message}")
