"""Wizard step views, one per (mode, step)."""

from __future__ import annotations

from ...core.machine import RecoveryWizard
from ...core.state import STEP_MODE, RecoveryMode
from .base import StepView
from .found import FoundWalletStep
from .mode import ModeStep
from .password import PasswordStep
from .phrase import PhraseStep
from .wallet import WalletStep

STEP_VIEWS: dict[tuple[RecoveryMode, int], type[StepView]] = {
    (RecoveryMode.KNOWN_WALLET, 1): WalletStep,
    (RecoveryMode.KNOWN_WALLET, 2): PhraseStep,
    (RecoveryMode.KNOWN_WALLET, 3): PasswordStep,
    (RecoveryMode.FORGOT_WALLET, 1): PhraseStep,
    (RecoveryMode.FORGOT_WALLET, 2): FoundWalletStep,
    (RecoveryMode.FORGOT_WALLET, 3): PasswordStep,
}


def build_step(wizard: RecoveryWizard) -> StepView:
    state = wizard.state
    if state.step == STEP_MODE:
        return ModeStep(wizard, id="step-view")
    return STEP_VIEWS[(state.mode, state.step)](wizard, id="step-view")
