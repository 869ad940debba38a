"""Shared behaviour for wizard step views."""

from __future__ import annotations

from textual.containers import Vertical
from textual.widgets import Static

from ...core.machine import RecoveryWizard


class StepView(Vertical):
    """A step bound to the wizard; shows per-field errors in ``#err-<field>`` labels."""

    def __init__(self, wizard: RecoveryWizard, **kw) -> None:
        super().__init__(**kw)
        self._wizard = wizard

    @staticmethod
    def error_label(field_id: str) -> Static:
        return Static("", id=f"err-{field_id}", classes="field-error")

    def show_errors(self, errors: dict[str, str]) -> None:
        for label in self.query(".field-error"):
            field_id = (label.id or "").removeprefix("err-")
            message = errors.get(field_id, "")
            label.update(f"[#FF3333]{message}[/]" if message else "")
            label.display = bool(message)
