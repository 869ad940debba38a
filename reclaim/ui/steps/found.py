"""Forgot wallet, step 2 — confirm the wallet the phrase belongs to."""

from __future__ import annotations

from textual.widgets import Static

from ...core.state import FIELD_RECOVERY_PHRASE
from .base import StepView


class FoundWalletStep(StepView):
    def compose(self):
        wallet = self._wizard.state.recovered_wallet
        yield Static("Your wallet", classes="step-title")
        if wallet is None:
            yield Static("No wallet found yet. Go back and enter your recovery phrase.", classes="step-subtitle")
        else:
            yield Static(
                "We found the wallet that belongs to your recovery phrase. "
                "Continue to set a new password for it.",
                classes="step-subtitle",
            )
            lines = [
                f"[bold]Name:[/]     {wallet.name}",
                f"[bold]Address:[/]  {wallet.address}",
            ]
            if wallet.created_at:
                lines.append(f"[bold]Created:[/]  {wallet.created_at}")
            yield Static("\n".join(lines), id="found-wallet", classes="wallet-card")
        yield self.error_label(FIELD_RECOVERY_PHRASE)
