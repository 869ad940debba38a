"""Left sidebar — the steps of the chosen recovery flow with progress markers."""

from __future__ import annotations

from textual.containers import Vertical
from textual.widgets import Static

from ..core.state import RECOVERY_STEPS, WizardState


class Sidebar(Vertical):
    """Vertical list of step labels.

    Steps cannot be jumped to: every forward move goes through the gates,
    so the items are display-only.
    """

    def compose(self):
        for i in range(RECOVERY_STEPS + 1):
            yield Static("", id=f"sb-{i}", classes="sidebar-item")

    def refresh_indicators(self, state: WizardState) -> None:
        labels = state.step_labels
        for i in range(RECOVERY_STEPS + 1):
            item = self.query_one(f"#sb-{i}", Static)
            item.remove_class("--current", "--completed", "--locked")
            if i >= len(labels):
                item.update("")
                item.display = False
                continue
            item.display = True
            label = labels[i]
            if i == state.step and not state.submitted:
                item.update(f"  [>] {label}")
                item.add_class("--current")
            elif i < state.step or state.submitted:
                item.update(f"  [+] {label}")
                item.add_class("--completed")
            else:
                item.update(f"  [ ] {label}")
                item.add_class("--locked")
