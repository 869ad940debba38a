"""Recovery phrase entry with live word count and preview."""

from __future__ import annotations

from textual.containers import Horizontal
from textual.widgets import Button, Static, TextArea

from ...core.rules import PHRASE_WORD_COUNT
from ...core.state import FIELD_RECOVERY_PHRASE, RecoveryMode, phrase_words
from ..clipboard import clipboard_paste
from .base import StepView


class PhraseStep(StepView):
    def compose(self):
        forgot = self._wizard.state.mode == RecoveryMode.FORGOT_WALLET

        yield Static("Enter recovery phrase", classes="step-title")
        if forgot:
            yield Static(
                "Enter your 12-word recovery phrase. We'll look up the wallet "
                "it belongs to.",
                classes="step-subtitle",
            )
        else:
            yield Static(
                "Enter your 12-word recovery phrase to verify that you own the "
                "selected wallet. All 12 words must be in the correct order.",
                classes="step-subtitle",
            )
        yield Static(
            "[dim]Separate words with spaces. To paste, use the Paste button "
            "or Ctrl+Shift+V in the text area.[/dim]",
            classes="step-hint",
        )
        yield TextArea(self._wizard.state.recovery_phrase, id="phrase-input")
        with Horizontal(id="phrase-actions"):
            yield Button("Paste", id="btn-paste-phrase", classes="pwd-action-btn")
            yield Static("", id="word-count")
        yield self.error_label(FIELD_RECOVERY_PHRASE)
        yield Static("", id="word-preview")

    def on_mount(self) -> None:
        self._update_preview(self._wizard.state.recovery_phrase)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        event.stop()
        text = event.text_area.text
        self._wizard.edit(FIELD_RECOVERY_PHRASE, text)
        self._update_preview(text)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id != "btn-paste-phrase":
            return
        event.stop()
        text = clipboard_paste()
        if text:
            self.query_one("#phrase-input", TextArea).text = " ".join(phrase_words(text))
            self.app.notify("Pasted from clipboard", severity="information")
        else:
            self.app.notify(
                "Clipboard unavailable. Click the text area, then press "
                "Ctrl+Shift+V to paste from your terminal",
                severity="warning",
            )

    def _update_preview(self, text: str) -> None:
        words = phrase_words(text)
        count = self.query_one("#word-count", Static)
        if len(words) == PHRASE_WORD_COUNT:
            count.update(f"[#00FF41]{len(words)} / {PHRASE_WORD_COUNT} words  Valid word count[/]")
        else:
            count.update(f"[dim]{len(words)} / {PHRASE_WORD_COUNT} words[/dim]")
        cells = [f"{i + 1:>2}. {word}" for i, word in enumerate(words[:PHRASE_WORD_COUNT])]
        rows = ["   ".join(f"{c:<16}" for c in cells[i:i + 4]) for i in range(0, len(cells), 4)]
        self.query_one("#word-preview", Static).update("\n".join(rows))
