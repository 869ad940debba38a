"""Final step — new password with strength meter."""

from __future__ import annotations

from textual.containers import Horizontal
from textual.reactive import reactive
from textual.widgets import Checkbox, Input, Label, Static

from ...core.rules import MIN_PASSWORD_LENGTH, check_password_strength
from ...core.state import FIELD_CONFIRM_PASSWORD, FIELD_NEW_PASSWORD
from .base import StepView


class StrengthBar(Static):
    """10-cell password strength indicator."""

    score: reactive[int] = reactive(0)

    def render(self) -> str:
        filled = self.score // 10
        empty = 10 - filled
        if self.score >= 80:
            color, label = "#00FF41", "Excellent"
        elif self.score >= 60:
            color, label = "#00CC33", "Strong"
        elif self.score >= 40:
            color, label = "#FFD700", "Fair"
        elif self.score >= 20:
            color, label = "#FF8800", "Weak"
        else:
            color, label = "#FF3333", "Very weak"
        return f"[{color}]{'█' * filled}{'░' * empty}[/] {label}"


class PasswordStep(StepView):
    """New password + confirmation."""

    def compose(self):
        target = self._wizard.state.target_address
        yield Static("Create new password", classes="step-title")
        yield Static(
            f"Recovery phrase verified. Set a new password for {target}.",
            classes="step-subtitle",
        )
        yield Static(
            f"[dim]Minimum {MIN_PASSWORD_LENGTH} characters. The strength meter is "
            "advisory; a long passphrase is best.[/dim]",
            classes="step-hint",
        )

        with Horizontal(classes="field-row"):
            yield Label("Password:", classes="field-label")
            yield Input(
                placeholder=f"Minimum {MIN_PASSWORD_LENGTH} characters",
                password=True,
                id="pwd-input",
                classes="password-field",
            )
        with Horizontal(classes="field-row"):
            yield Label("", classes="field-label")  # spacer
            yield StrengthBar(id="strength-bar")
            yield Static("", id="match-indicator")
        yield Static("", id="pwd-feedback")
        yield self.error_label(FIELD_NEW_PASSWORD)

        with Horizontal(classes="field-row"):
            yield Label("Confirm:", classes="field-label")
            yield Input(
                placeholder="Re-enter password to confirm...",
                password=True,
                id="pwd-confirm",
                classes="password-field",
            )
        yield self.error_label(FIELD_CONFIRM_PASSWORD)

        yield Checkbox("Show password", id="show-pwd-check", value=False)

    def on_mount(self) -> None:
        state = self._wizard.state
        if state.new_password:
            self.query_one("#pwd-input", Input).value = state.new_password
        if state.confirm_password:
            self.query_one("#pwd-confirm", Input).value = state.confirm_password

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        if event.input.id == "pwd-input":
            self._wizard.edit(FIELD_NEW_PASSWORD, event.value)
            self._update_strength()
            self._update_match()
        elif event.input.id == "pwd-confirm":
            self._wizard.edit(FIELD_CONFIRM_PASSWORD, event.value)
            self._update_match()

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        if event.checkbox.id == "show-pwd-check":
            event.stop()
            for input_id in ("#pwd-input", "#pwd-confirm"):
                self.query_one(input_id, Input).password = not event.value

    def _update_strength(self) -> None:
        pwd = self._wizard.state.new_password
        bar = self.query_one("#strength-bar", StrengthBar)
        fb = self.query_one("#pwd-feedback", Static)
        if pwd:
            result = check_password_strength(pwd)
            bar.score = result.score
            fb.update("[dim]" + " · ".join(result.feedback[:2]) + "[/dim]" if result.feedback else "")
        else:
            bar.score = 0
            fb.update("")

    def _update_match(self) -> None:
        state = self._wizard.state
        indicator = self.query_one("#match-indicator", Static)
        if state.confirm_password and state.new_password == state.confirm_password:
            indicator.update("[#00FF41]Match[/#00FF41]")
        elif state.confirm_password:
            indicator.update("[#FF3333]No match[/#FF3333]")
        else:
            indicator.update("")
