"""
Per-step validation rules.

Synchronous and free of I/O: every validator takes the current
:class:`WizardState` and returns the field errors that block the step.
Also provides the advisory password strength meter shown next to the
new-password field (it never gates submission).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from .state import (
    FIELD_CONFIRM_PASSWORD,
    FIELD_MANUAL_ADDRESS,
    FIELD_NEW_PASSWORD,
    FIELD_RECOVERY_PHRASE,
    FIELD_SELECTED_WALLET,
    RecoveryMode,
    WalletInputMode,
    WizardState,
)

PHRASE_WORD_COUNT = 12
MIN_ADDRESS_LENGTH = 10
MIN_PASSWORD_LENGTH = 8

MSG_SELECT_WALLET = "Please select a wallet to recover"
MSG_ADDRESS_REQUIRED = "Wallet address is required"
MSG_ADDRESS_TOO_SHORT = f"Wallet address must be at least {MIN_ADDRESS_LENGTH} characters"
MSG_PHRASE_REQUIRED = "Recovery phrase is required"
MSG_PHRASE_WORD_COUNT = f"Recovery phrase must be exactly {PHRASE_WORD_COUNT} words"
MSG_WALLET_NOT_RECOVERED = "Find your wallet with your recovery phrase first"
MSG_PASSWORD_TOO_SHORT = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
MSG_PASSWORDS_DIFFER = "Passwords do not match"


@dataclass(frozen=True)
class FieldError:
    field_id: str
    message: str


def _known_wallet_target(state: WizardState) -> list[FieldError]:
    if state.wallet_input_mode == WalletInputMode.SELECT:
        if not state.selected_wallet_id or state.selected_wallet is None:
            return [FieldError(FIELD_SELECTED_WALLET, MSG_SELECT_WALLET)]
        return []
    address = state.manual_address.strip()
    if not address:
        return [FieldError(FIELD_MANUAL_ADDRESS, MSG_ADDRESS_REQUIRED)]
    if len(address) < MIN_ADDRESS_LENGTH:
        return [FieldError(FIELD_MANUAL_ADDRESS, MSG_ADDRESS_TOO_SHORT)]
    return []


def _phrase_present_and_complete(state: WizardState) -> list[FieldError]:
    if not state.recovery_phrase.strip():
        return [FieldError(FIELD_RECOVERY_PHRASE, MSG_PHRASE_REQUIRED)]
    return _phrase_complete(state)


def _phrase_complete(state: WizardState) -> list[FieldError]:
    if len(state.phrase_words) != PHRASE_WORD_COUNT:
        return [FieldError(FIELD_RECOVERY_PHRASE, MSG_PHRASE_WORD_COUNT)]
    return []


def _wallet_recovered(state: WizardState) -> list[FieldError]:
    if state.recovered_wallet is None:
        return [FieldError(FIELD_RECOVERY_PHRASE, MSG_WALLET_NOT_RECOVERED)]
    return []


def _new_password(state: WizardState) -> list[FieldError]:
    errors = []
    if len(state.new_password) < MIN_PASSWORD_LENGTH:
        errors.append(FieldError(FIELD_NEW_PASSWORD, MSG_PASSWORD_TOO_SHORT))
    if state.new_password != state.confirm_password:
        errors.append(FieldError(FIELD_CONFIRM_PASSWORD, MSG_PASSWORDS_DIFFER))
    return errors


VALIDATORS: dict[tuple[RecoveryMode, int], Callable[[WizardState], list[FieldError]]] = {
    (RecoveryMode.KNOWN_WALLET, 1): _known_wallet_target,
    (RecoveryMode.KNOWN_WALLET, 2): _phrase_present_and_complete,
    (RecoveryMode.KNOWN_WALLET, 3): _new_password,
    (RecoveryMode.FORGOT_WALLET, 1): _phrase_complete,
    (RecoveryMode.FORGOT_WALLET, 2): _wallet_recovered,
    (RecoveryMode.FORGOT_WALLET, 3): _new_password,
}


def validate(mode: RecoveryMode, step: int, state: WizardState) -> list[FieldError]:
    """Return the errors blocking ``step`` of ``mode``; empty means the step passes."""
    validator = VALIDATORS.get((mode, step))
    if validator is None:
        return []
    return validator(state)


def errors_by_field(errors: list[FieldError]) -> dict[str, str]:
    """Collapse to one message per field, first error wins."""
    out: dict[str, str] = {}
    for err in errors:
        out.setdefault(err.field_id, err.message)
    return out


# ---------------------------------------------------------------------------
# Strength meter
# ---------------------------------------------------------------------------


@dataclass
class PasswordStrength:
    """Result of password strength analysis."""
    score: int            # 0-100
    label: str            # "Weak", "Fair", "Strong", "Excellent"
    feedback: list[str]   # Human-readable improvement suggestions


def check_password_strength(password: str) -> PasswordStrength:
    """
    Score a candidate password on a 0-100 scale.

    Purely advisory. The only hard requirement for recovery is the
    length rule enforced by :func:`validate`.
    """
    if not password:
        return PasswordStrength(score=0, label="Weak", feedback=["Password cannot be empty"])

    score = 0
    feedback: list[str] = []
    length = len(password)

    if length >= 16:
        score += 35
    elif length >= 12:
        score += 25
    elif length >= MIN_PASSWORD_LENGTH:
        score += 15
    else:
        feedback.append(f"Use at least {MIN_PASSWORD_LENGTH} characters (currently {length})")

    for pattern, hint in (
        (r"[A-Z]", "Add uppercase letters (A-Z)"),
        (r"[a-z]", "Add lowercase letters (a-z)"),
        (r"[0-9]", "Add digits (0-9)"),
        (r"[^A-Za-z0-9\s]", "Add special characters (!@#$%...)"),
    ):
        if re.search(pattern, password):
            score += 10
        else:
            feedback.append(hint)

    unique_chars = len(set(password))
    if unique_chars >= 10:
        score += 15
    elif unique_chars >= 6:
        score += 8

    if re.search(r"(.)\1{2,}", password):
        feedback.append("Avoid repeated characters (aaa, 111)")
    else:
        score += 10

    score = min(score, 100)
    if score >= 80:
        label = "Excellent"
    elif score >= 60:
        label = "Strong"
    elif score >= 40:
        label = "Fair"
    else:
        label = "Weak"
    return PasswordStrength(score=score, label=label, feedback=feedback)
