"""Tests for per-step validation rules and the password strength meter."""

from dataclasses import replace

from reclaim.core.rules import (
    MSG_ADDRESS_REQUIRED,
    MSG_ADDRESS_TOO_SHORT,
    MSG_PASSWORD_TOO_SHORT,
    MSG_PASSWORDS_DIFFER,
    MSG_PHRASE_REQUIRED,
    MSG_PHRASE_WORD_COUNT,
    MSG_SELECT_WALLET,
    MSG_WALLET_NOT_RECOVERED,
    FieldError,
    check_password_strength,
    errors_by_field,
    validate,
)
from reclaim.core.state import (
    FIELD_CONFIRM_PASSWORD,
    FIELD_MANUAL_ADDRESS,
    FIELD_NEW_PASSWORD,
    FIELD_RECOVERY_PHRASE,
    FIELD_SELECTED_WALLET,
    RecoveryMode,
    WalletInputMode,
    WalletSummary,
    WizardState,
    phrase_words,
)

KNOWN = RecoveryMode.KNOWN_WALLET
FORGOT = RecoveryMode.FORGOT_WALLET
WORDS = [f"word{i}" for i in range(1, 14)]
WALLET = WalletSummary(id="w1", name="Main", address="0x1234567890abcdef")


def _state(**kw):
    return WizardState(total_steps=3, step=1, **kw)


class TestPhraseWords:

    def test_splits_on_whitespace_runs(self):
        assert phrase_words("  a  b   c ") == ["a", "b", "c"]

    def test_tabs_and_newlines(self):
        assert phrase_words("a\tb\nc") == ["a", "b", "c"]

    def test_empty(self):
        assert phrase_words("   ") == []


class TestTwelveWordGate:

    def test_exactly_twelve_passes(self):
        state = _state(mode=FORGOT, recovery_phrase=" ".join(WORDS[:12]))
        assert validate(FORGOT, 1, state) == []

    def test_eleven_and_thirteen_share_message(self):
        short = _state(mode=FORGOT, recovery_phrase=" ".join(WORDS[:11]))
        long = _state(mode=FORGOT, recovery_phrase=" ".join(WORDS[:13]))
        short_errors = validate(FORGOT, 1, short)
        long_errors = validate(FORGOT, 1, long)
        assert short_errors == long_errors
        assert short_errors == [FieldError(FIELD_RECOVERY_PHRASE, MSG_PHRASE_WORD_COUNT)]

    def test_known_mode_empty_phrase_is_required(self):
        state = _state(mode=KNOWN, recovery_phrase="   ")
        assert validate(KNOWN, 2, state) == [FieldError(FIELD_RECOVERY_PHRASE, MSG_PHRASE_REQUIRED)]

    def test_known_mode_word_count(self):
        state = _state(mode=KNOWN, recovery_phrase=" ".join(WORDS[:11]))
        assert validate(KNOWN, 2, state)[0].message == MSG_PHRASE_WORD_COUNT

    def test_extra_whitespace_does_not_count(self):
        state = _state(mode=FORGOT, recovery_phrase="\n  " + "   ".join(WORDS[:12]) + "  \n")
        assert validate(FORGOT, 1, state) == []


class TestKnownWalletTarget:

    def test_select_requires_choice(self):
        state = _state(mode=KNOWN, available_wallets=(WALLET,))
        assert validate(KNOWN, 1, state) == [FieldError(FIELD_SELECTED_WALLET, MSG_SELECT_WALLET)]

    def test_select_unknown_id_rejected(self):
        state = _state(mode=KNOWN, available_wallets=(WALLET,), selected_wallet_id="nope")
        assert validate(KNOWN, 1, state)[0].field_id == FIELD_SELECTED_WALLET

    def test_select_valid(self):
        state = _state(mode=KNOWN, available_wallets=(WALLET,), selected_wallet_id="w1")
        assert validate(KNOWN, 1, state) == []

    def test_manual_required(self):
        state = _state(mode=KNOWN, wallet_input_mode=WalletInputMode.MANUAL, manual_address="  ")
        assert validate(KNOWN, 1, state) == [FieldError(FIELD_MANUAL_ADDRESS, MSG_ADDRESS_REQUIRED)]

    def test_manual_too_short(self):
        state = _state(mode=KNOWN, wallet_input_mode=WalletInputMode.MANUAL, manual_address="0x123")
        assert validate(KNOWN, 1, state) == [FieldError(FIELD_MANUAL_ADDRESS, MSG_ADDRESS_TOO_SHORT)]

    def test_manual_length_is_measured_trimmed(self):
        state = _state(
            mode=KNOWN,
            wallet_input_mode=WalletInputMode.MANUAL,
            manual_address="   0x1234567   ",
        )
        assert validate(KNOWN, 1, state)[0].message == MSG_ADDRESS_TOO_SHORT

    def test_manual_ten_characters_passes(self):
        state = _state(mode=KNOWN, wallet_input_mode=WalletInputMode.MANUAL, manual_address="0x12345678")
        assert validate(KNOWN, 1, state) == []


class TestForgotWalletFound:

    def test_requires_recovered_wallet(self):
        state = _state(mode=FORGOT)
        assert validate(FORGOT, 2, state) == [FieldError(FIELD_RECOVERY_PHRASE, MSG_WALLET_NOT_RECOVERED)]

    def test_passes_with_recovered_wallet(self):
        state = _state(mode=FORGOT, recovered_wallet=WALLET)
        assert validate(FORGOT, 2, state) == []


class TestPasswordGate:

    def _final(self, new, confirm):
        return replace(_state(mode=KNOWN), step=3, new_password=new, confirm_password=confirm)

    def test_matching_eight_characters_passes(self):
        assert validate(KNOWN, 3, self._final("Abc12345", "Abc12345")) == []

    def test_too_short(self):
        errors = validate(KNOWN, 3, self._final("Abc1234", "Abc1234"))
        assert errors == [FieldError(FIELD_NEW_PASSWORD, MSG_PASSWORD_TOO_SHORT)]

    def test_mismatch(self):
        errors = validate(FORGOT, 3, self._final("Abc12345", "Abc12346"))
        assert errors == [FieldError(FIELD_CONFIRM_PASSWORD, MSG_PASSWORDS_DIFFER)]

    def test_both_reported(self):
        errors = validate(KNOWN, 3, self._final("short", "other"))
        assert {e.field_id for e in errors} == {FIELD_NEW_PASSWORD, FIELD_CONFIRM_PASSWORD}

    def test_weak_but_long_enough_passes(self):
        # The strength meter is advisory only
        assert validate(KNOWN, 3, self._final("aaaaaaaa", "aaaaaaaa")) == []


class TestUnknownStep:

    def test_mode_step_has_no_rules(self):
        assert validate(RecoveryMode.UNSELECTED, 0, WizardState()) == []


class TestErrorsByField:

    def test_first_error_wins(self):
        errors = [
            FieldError(FIELD_NEW_PASSWORD, "first"),
            FieldError(FIELD_NEW_PASSWORD, "second"),
            FieldError(FIELD_CONFIRM_PASSWORD, "other"),
        ]
        assert errors_by_field(errors) == {
            FIELD_NEW_PASSWORD: "first",
            FIELD_CONFIRM_PASSWORD: "other",
        }


class TestPasswordStrength:

    def test_empty_password(self):
        result = check_password_strength("")
        assert result.score == 0
        assert result.label == "Weak"

    def test_short_password_gets_length_feedback(self):
        result = check_password_strength("abc")
        assert any("at least 8" in f for f in result.feedback)

    def test_strong_password(self):
        result = check_password_strength("C0rrect-H0rse-Battery!")
        assert result.label in ("Strong", "Excellent")
        assert result.score >= 60

    def test_repeated_characters_flagged(self):
        result = check_password_strength("aaaBBB111!!!xyz")
        assert any("repeated" in f for f in result.feedback)

    def test_score_capped(self):
        assert check_password_strength("Xy9!" * 20).score <= 100
