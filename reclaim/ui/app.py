"""RECLAIM recovery wizard — Textual front end.

Keyboard:
  Tab / Shift+Tab   Navigate between fields
  Ctrl+N            Next (runs the step's checks)
  Ctrl+B            Back
  Ctrl+K            Recover a wallet I know
  Ctrl+F            Recover a wallet I forgot
  Ctrl+L            Cancel and start over
  Ctrl+Q            Quit
  F1                Help
"""

from __future__ import annotations

from typing import Any

from loguru import logger
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, Footer, Static

from ..core.config import effective_config
from ..core.errors import StoreError
from ..core.gateway import HttpRecoveryGateway
from ..core.machine import RecoveryWizard, StepResult
from ..core.state import STEP_MODE, RecoveryMode, WizardState
from ..core.store import FileCache
from ..core.submission import SIGN_IN
from .sidebar import Sidebar
from .steps import StepView, build_step
from .theme import WIZARD_CSS


def _view_key(state: WizardState) -> tuple:
    return (state.mode, state.step, state.submitted)


def _next_label(state: WizardState) -> str:
    if state.pending.verifying_wallet:
        return "Verifying..."
    if state.pending.recovering_wallet:
        return "Searching..."
    if state.pending.submitting:
        return "Resetting..."
    if state.is_final_step:
        return "Reset password"
    if state.mode == RecoveryMode.FORGOT_WALLET and state.step == 1:
        return "Find wallet"
    return "Next"


class RecoveryApp(App):
    """Step-by-step password recovery."""

    TITLE = "RECLAIM"
    CSS = WIZARD_CSS

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+n", "next_step", "Next"),
        Binding("ctrl+b", "prev_step", "Back"),
        Binding("ctrl+k", "quick_known", "Known wallet"),
        Binding("ctrl+f", "quick_forgot", "Forgot wallet"),
        Binding("ctrl+l", "clear_all", "Start over"),
        Binding("f1", "show_help", "Help"),
    ]

    def __init__(self, wizard: RecoveryWizard | None = None, **kw) -> None:
        super().__init__(**kw)
        if wizard is None:
            config = effective_config()
            wizard = RecoveryWizard(
                HttpRecoveryGateway(config["api_url"], config["timeout"]),
                FileCache(config["store_path"]),
                redirect_delay=config["redirect_delay"],
            )
        self._wizard = wizard
        self._mounted_key: tuple | None = None

    # ── Compose ────────────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        with Horizontal(id="header-bar"):
            yield Static("[bold #00FF41]⬡ RECLAIM[/]", id="header-title")
            yield Static("[#007018]Wallet password recovery[/]", id="header-subtitle")
        with Horizontal(id="body"):
            yield Sidebar(id="sidebar")
            with Vertical(id="main"):
                yield Static("", id="top-step")
                yield Container(id="step-container")
                with Horizontal(id="nav-bar"):
                    yield Button("Back", id="btn-back")
                    yield Button("Next", id="btn-next")
        yield Footer()

    async def on_mount(self) -> None:
        try:
            self._wizard.load_wallets()
        except StoreError as exc:
            logger.warning("Local wallet list unavailable: {}", exc)
            self.notify(f"Local wallets unavailable: {exc}", severity="warning")
        self._wizard.subscribe(self._on_state)
        await self._swap_step()

    async def on_unmount(self) -> None:
        await self._wizard.gateway.aclose()

    # ── Rendering ──────────────────────────────────────────────────

    def _on_state(self, state: WizardState) -> None:
        self._refresh_chrome()
        if _view_key(state) != self._mounted_key:
            self.call_later(self._swap_step)

    async def _swap_step(self) -> None:
        state = self._wizard.state
        key = _view_key(state)
        if key != self._mounted_key:
            container = self.query_one("#step-container", Container)
            await container.remove_children()
            self._mounted_key = key
            if state.submitted:
                await container.mount(Static(
                    "Password reset successfully!\n\n"
                    "You can now sign in with your new password.",
                    id="done-message",
                ))
            else:
                await container.mount(build_step(self._wizard))
        self._refresh_chrome()

    def _refresh_chrome(self) -> None:
        state = self._wizard.state
        busy = state.pending.any

        self.query_one(Sidebar).refresh_indicators(state)

        top = self.query_one("#top-step", Static)
        if state.submitted:
            top.update("Done")
        elif state.step == STEP_MODE:
            top.update("Choose how to recover")
        else:
            pct = round(state.step / state.total_steps * 100)
            top.update(
                f"Step {state.step} of {state.total_steps} · "
                f"{state.step_labels[state.step]} · {pct}% complete"
            )

        back = self.query_one("#btn-back", Button)
        nxt = self.query_one("#btn-next", Button)
        back.disabled = busy or state.submitted or state.step == STEP_MODE
        nxt.disabled = busy or state.submitted or state.step == STEP_MODE
        nxt.label = _next_label(state)

        container = self.query_one("#step-container", Container)
        container.disabled = busy
        for view in container.query(StepView):
            view.show_errors(state.field_errors)

    def _show(self, result: StepResult) -> None:
        if result.notice is not None:
            self.notify(
                result.notice.message,
                severity=result.notice.severity,  # type: ignore[arg-type]
                timeout=result.notice.timeout,
            )
        if result.navigation is not None:
            self.set_timer(result.navigation.delay, self._leave_for_sign_in)

    def _leave_for_sign_in(self) -> None:
        self._wizard.reset()
        self.exit(SIGN_IN)

    # ── Buttons ────────────────────────────────────────────────────

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-next":
            self.action_next_step()
        elif event.button.id == "btn-back":
            self.action_prev_step()

    # ── Actions ────────────────────────────────────────────────────

    def action_next_step(self) -> None:
        if self._wizard.busy:
            return
        self._advance()

    @work(exclusive=True, group="gate")
    async def _advance(self) -> None:
        result = await self._wizard.advance()
        self._show(result)

    def action_prev_step(self) -> None:
        self._show(self._wizard.retreat())

    def action_quick_known(self) -> None:
        self._show(self._wizard.select_mode(RecoveryMode.KNOWN_WALLET))

    def action_quick_forgot(self) -> None:
        self._show(self._wizard.select_mode(RecoveryMode.FORGOT_WALLET))

    def action_clear_all(self) -> None:
        self._wizard.reset()
        self.notify("Recovery cancelled. Start over when you're ready.")

    def action_show_help(self) -> None:
        self.notify(
            "Keyboard shortcuts:\n"
            "  Tab / Shift+Tab  Navigate fields\n"
            "  Ctrl+N  Next        Ctrl+B  Back\n"
            "  Ctrl+K  Known wallet  Ctrl+F  Forgot wallet\n"
            "  Ctrl+L  Start over  Ctrl+Q  Quit",
            severity="information",
            timeout=10,
        )


def run_gui(wizard: RecoveryWizard | None = None) -> Any:
    """Launch the RECLAIM wizard TUI. Returns ``"sign-in"`` after a successful reset."""
    app = RecoveryApp(wizard)
    result = app.run()
    if result == SIGN_IN:
        print("Password reset. Sign in with your new password.")
    return result
