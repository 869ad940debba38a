"""Known wallet, step 1 — pick a local wallet or type its address."""

from __future__ import annotations

from textual.containers import Horizontal
from textual.widgets import Input, Label, RadioButton, RadioSet, Select, Static

from ...core.state import FIELD_MANUAL_ADDRESS, FIELD_SELECTED_WALLET, WalletInputMode
from .base import StepView


class WalletStep(StepView):
    def compose(self):
        state = self._wizard.state
        manual = state.wallet_input_mode == WalletInputMode.MANUAL

        yield Static("Select your wallet", classes="step-title")
        yield Static(
            "Choose the wallet you want to recover. If it was created on another "
            "device, enter its address instead.",
            classes="step-subtitle",
        )
        with RadioSet(id="wallet-input-mode"):
            yield RadioButton("Wallets on this device", value=not manual, id="input-select")
            yield RadioButton("Enter address manually", value=manual, id="input-manual")

        with Horizontal(classes="field-row", id="select-row"):
            yield Label("Wallet:", classes="field-label")
            yield Select(
                [(f"{w.name}  {w.short_address}", w.id) for w in state.available_wallets],
                prompt="Choose your wallet" if state.available_wallets else "No wallets found",
                id="wallet-select",
            )
        yield self.error_label(FIELD_SELECTED_WALLET)

        with Horizontal(classes="field-row", id="manual-row"):
            yield Label("Address:", classes="field-label")
            yield Input(
                placeholder="0x...",
                value=state.manual_address,
                id="address-input",
            )
        yield self.error_label(FIELD_MANUAL_ADDRESS)

    def on_mount(self) -> None:
        state = self._wizard.state
        if state.selected_wallet is not None:
            self.query_one("#wallet-select", Select).value = state.selected_wallet_id
        self._toggle_rows(state.wallet_input_mode)

    def _toggle_rows(self, input_mode: WalletInputMode) -> None:
        manual = input_mode == WalletInputMode.MANUAL
        self.query_one("#select-row").display = not manual
        self.query_one("#manual-row").display = manual

    def on_radio_set_changed(self, event: RadioSet.Changed) -> None:
        event.stop()
        input_mode = WalletInputMode.MANUAL if event.index == 1 else WalletInputMode.SELECT
        self._wizard.set_wallet_input_mode(input_mode)
        self._toggle_rows(input_mode)

    def on_select_changed(self, event: Select.Changed) -> None:
        event.stop()
        value = event.value if isinstance(event.value, str) else ""
        self._wizard.edit(FIELD_SELECTED_WALLET, value)

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        if event.input.id == "address-input":
            self._wizard.edit(FIELD_MANUAL_ADDRESS, event.value)
