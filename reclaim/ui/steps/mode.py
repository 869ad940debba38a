"""Mode selection — does the user still know which wallet they own?"""

from __future__ import annotations

from textual.widgets import RadioButton, RadioSet, Static

from ...core.state import RecoveryMode
from .base import StepView

MODES = [RecoveryMode.KNOWN_WALLET, RecoveryMode.FORGOT_WALLET]


class ModeStep(StepView):
    """Choose between the two recovery flows."""

    def compose(self):
        yield Static("Recover your account", classes="step-title")
        yield Static(
            "You'll need your 12-word recovery phrase to reset your password. "
            "Make sure you have it ready before continuing.",
            classes="step-subtitle",
        )
        yield Static(
            "[dim]Use Up/Down arrows to highlight, Enter to select, "
            "or press Ctrl+K / Ctrl+F to skip this step.[/dim]",
            classes="step-hint",
        )
        with RadioSet(id="mode-radio"):
            yield RadioButton(
                "I know my wallet\n"
                "  Pick it from this device or type its address, then\n"
                "  prove ownership with the recovery phrase.",
                id="radio-known",
            )
            yield RadioButton(
                "I forgot which wallet I own\n"
                "  Enter the recovery phrase and we'll find the wallet\n"
                "  it belongs to.",
                id="radio-forgot",
            )

    def on_radio_set_changed(self, event: RadioSet.Changed) -> None:
        event.stop()
        self._wizard.select_mode(MODES[event.index])
