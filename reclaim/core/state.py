"""Wizard state model — one immutable value holding every user choice."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class RecoveryMode(Enum):
    UNSELECTED = "unselected"
    KNOWN_WALLET = "known_wallet"
    FORGOT_WALLET = "forgot_wallet"


class WalletInputMode(Enum):
    SELECT = "select"
    MANUAL = "manual"


STEP_MODE = 0
STEP_FIRST = 1
RECOVERY_STEPS = 3

# Field ids — one error slot per validated input
FIELD_SELECTED_WALLET = "selected_wallet"
FIELD_MANUAL_ADDRESS = "manual_address"
FIELD_RECOVERY_PHRASE = "recovery_phrase"
FIELD_NEW_PASSWORD = "new_password"
FIELD_CONFIRM_PASSWORD = "confirm_password"

EDITABLE_FIELDS = (
    FIELD_SELECTED_WALLET,
    FIELD_MANUAL_ADDRESS,
    FIELD_RECOVERY_PHRASE,
    FIELD_NEW_PASSWORD,
    FIELD_CONFIRM_PASSWORD,
)

# Inputs each step owns; edits to any other field are refused
STEP_FIELDS: dict[RecoveryMode, dict[int, tuple[str, ...]]] = {
    RecoveryMode.KNOWN_WALLET: {
        1: (FIELD_SELECTED_WALLET, FIELD_MANUAL_ADDRESS),
        2: (FIELD_RECOVERY_PHRASE,),
        3: (FIELD_NEW_PASSWORD, FIELD_CONFIRM_PASSWORD),
    },
    RecoveryMode.FORGOT_WALLET: {
        1: (FIELD_RECOVERY_PHRASE,),
        3: (FIELD_NEW_PASSWORD, FIELD_CONFIRM_PASSWORD),
    },
}

STEP_LABELS = {
    RecoveryMode.UNSELECTED: ["Mode"],
    RecoveryMode.KNOWN_WALLET: ["Mode", "Wallet", "Recovery phrase", "New password"],
    RecoveryMode.FORGOT_WALLET: ["Mode", "Recovery phrase", "Your wallet", "New password"],
}


def phrase_words(text: str) -> list[str]:
    """Split a recovery phrase on runs of whitespace, dropping empty tokens."""
    return [w for w in text.strip().split() if w]


@dataclass(frozen=True)
class WalletSummary:
    """Read-only projection of a wallet record."""

    id: str
    name: str
    address: str
    created_at: str = ""

    @property
    def short_address(self) -> str:
        if len(self.address) <= 12:
            return self.address
        return f"{self.address[:6]}...{self.address[-4:]}"


@dataclass(frozen=True)
class PendingFlags:
    verifying_wallet: bool = False
    recovering_wallet: bool = False
    submitting: bool = False

    @property
    def any(self) -> bool:
        return self.verifying_wallet or self.recovering_wallet or self.submitting


@dataclass(frozen=True)
class WizardState:
    """Single source of truth for the recovery wizard.

    Instances are never mutated; transitions build a new value through
    :func:`reclaim.core.machine.reduce`.
    """

    mode: RecoveryMode = RecoveryMode.UNSELECTED
    step: int = STEP_MODE
    total_steps: int = 0

    # Known wallet, step 1
    wallet_input_mode: WalletInputMode = WalletInputMode.SELECT
    selected_wallet_id: str = ""
    manual_address: str = ""

    recovery_phrase: str = ""
    recovered_wallet: WalletSummary | None = None

    new_password: str = ""
    confirm_password: str = ""

    field_errors: Mapping[str, str] = field(default_factory=dict)
    pending: PendingFlags = PendingFlags()

    # External data, kept across resets
    available_wallets: tuple[WalletSummary, ...] = ()

    generation: int = 0
    submitted: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "field_errors", MappingProxyType(dict(self.field_errors)))

    @property
    def phrase_words(self) -> list[str]:
        return phrase_words(self.recovery_phrase)

    @property
    def selected_wallet(self) -> WalletSummary | None:
        for wallet in self.available_wallets:
            if wallet.id == self.selected_wallet_id:
                return wallet
        return None

    @property
    def target_address(self) -> str:
        """Address the recovery applies to, or ``""`` if none is known yet."""
        if self.mode == RecoveryMode.FORGOT_WALLET:
            return self.recovered_wallet.address if self.recovered_wallet else ""
        if self.mode == RecoveryMode.KNOWN_WALLET:
            if self.wallet_input_mode == WalletInputMode.MANUAL:
                return self.manual_address.strip()
            wallet = self.selected_wallet
            return wallet.address if wallet else ""
        return ""

    @property
    def editable_fields(self) -> tuple[str, ...]:
        return STEP_FIELDS.get(self.mode, {}).get(self.step, ())

    @property
    def is_final_step(self) -> bool:
        return self.total_steps > 0 and self.step == self.total_steps

    @property
    def step_labels(self) -> list[str]:
        return STEP_LABELS[self.mode]

    def field_value(self, field_id: str) -> str:
        if field_id == FIELD_SELECTED_WALLET:
            return self.selected_wallet_id
        return getattr(self, field_id)

    def with_errors(self, errors: Mapping[str, str]) -> WizardState:
        merged = dict(self.field_errors)
        merged.update(errors)
        return replace(self, field_errors=merged)

    def without_error(self, field_id: str) -> WizardState:
        if field_id not in self.field_errors:
            return self
        remaining = {k: v for k, v in self.field_errors.items() if k != field_id}
        return replace(self, field_errors=remaining)


def initial_state(wallets: tuple[WalletSummary, ...] = ()) -> WizardState:
    """Fresh state as on wizard mount."""
    return WizardState(available_wallets=wallets)
