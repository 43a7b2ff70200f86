"""Error types surfaced by the text-based editor.

Each user-facing error carries the banner severity it should be shown with.
The controller catches ``TextCutError`` at its entry points and turns it into
a message; anything else propagates.
"""

from __future__ import annotations

from enum import Enum


class Severity(Enum):
    """Message banner severity."""

    INFO = "info"
    POSITIVE = "positive"
    WARNING = "warning"
    ERROR = "error"


class TextCutError(Exception):
    """Base class for errors reported to the user through the banner."""

    severity = Severity.ERROR

    def __init__(self, message: str = "") -> None:
        self.message = message or self.default_message()
        super().__init__(self.message)

    def default_message(self) -> str:
        return self.__class__.__name__


class RecognizerNotInstalled(TextCutError):
    """The Python interpreter that runs the recognizer script is missing."""

    severity = Severity.WARNING

    def default_message(self) -> str:
        from textcut.utils.i18n import tr
        return tr("Cannot find python3, please install it on your system.")


class RecognizerScriptMissing(TextCutError):
    """The speech-to-text script was not found in the data directory."""

    severity = Severity.WARNING

    def default_message(self) -> str:
        from textcut.utils.i18n import tr
        return tr("The speech script was not found, check your install.")


class NoClipSelected(TextCutError):
    severity = Severity.INFO

    def default_message(self) -> str:
        from textcut.utils.i18n import tr
        return tr("Select a clip for speech recognition.")


class NoLanguageModel(TextCutError):
    severity = Severity.WARNING

    def default_message(self) -> str:
        from textcut.utils.i18n import tr
        return tr("Please install a language model.")


class RecognizerCrashed(TextCutError):
    """The recognizer exited abnormally or was killed."""

    severity = Severity.WARNING

    def default_message(self) -> str:
        from textcut.utils.i18n import tr
        return tr("Speech recognition aborted.")


class NoSpeechDetected(TextCutError):
    severity = Severity.INFO

    def default_message(self) -> str:
        from textcut.utils.i18n import tr
        return tr("No speech detected.")


class ExportEmpty(TextCutError):
    severity = Severity.INFO

    def default_message(self) -> str:
        from textcut.utils.i18n import tr
        return tr("No text to export")


class MalformedHref(TextCutError, ValueError):
    """A token href could not be parsed. Internal: logged, never shown."""

    def __init__(self, href: str) -> None:
        self.href = href
        super().__init__(f"Malformed token href: {href!r}")
