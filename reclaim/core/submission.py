"""Final step: overwrite the password, then reconcile the local store."""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from .errors import GatewayError, StoreError
from .gateway import RecoveryGateway
from .log import mask_address
from .rules import FieldError, validate
from .state import FIELD_MANUAL_ADDRESS, FIELD_RECOVERY_PHRASE, FIELD_SELECTED_WALLET, RecoveryMode, WalletInputMode, WizardState
from .store import RECOVERED_WALLET_KEY, TransientCache, WalletDirectory
from .taxonomy import MappedError, Operation, map_failure

SIGN_IN = "sign-in"

MSG_NO_TARGET_WALLET = "No wallet selected for recovery. Go back and choose one"


@dataclass(frozen=True)
class Navigation:
    """Request to leave the wizard for ``target`` after ``delay`` seconds."""

    target: str
    delay: float


@dataclass(frozen=True)
class SubmissionOutcome:
    errors: list[FieldError] = field(default_factory=list)
    failure: MappedError | None = None
    navigation: Navigation | None = None

    @property
    def ok(self) -> bool:
        return not self.errors and self.failure is None


def _missing_target_field(state: WizardState) -> str:
    if state.mode == RecoveryMode.FORGOT_WALLET:
        return FIELD_RECOVERY_PHRASE
    if state.wallet_input_mode == WalletInputMode.MANUAL:
        return FIELD_MANUAL_ADDRESS
    return FIELD_SELECTED_WALLET


class SubmissionCoordinator:
    def __init__(
        self,
        gateway: RecoveryGateway,
        cache: TransientCache,
        wallets: WalletDirectory,
        redirect_delay: float = 2.0,
    ) -> None:
        self.gateway = gateway
        self.cache = cache
        self.wallets = wallets
        self.redirect_delay = redirect_delay

    def check(self, state: WizardState) -> list[FieldError]:
        """Local re-validation of the final step; no I/O."""
        errors = validate(state.mode, state.total_steps, state)
        if not state.target_address:
            errors.append(FieldError(_missing_target_field(state), MSG_NO_TARGET_WALLET))
        return errors

    async def submit(self, state: WizardState) -> SubmissionOutcome:
        errors = self.check(state)
        if errors:
            return SubmissionOutcome(errors=errors)

        address = state.target_address
        try:
            await self.gateway.overwrite_password(state.recovery_phrase, address, state.new_password)
        except GatewayError as exc:
            mapped = map_failure(Operation.OVERWRITE, exc)
            logger.warning("Password reset for {} failed: {}", mask_address(address), mapped.kind.value)
            return SubmissionOutcome(failure=mapped)

        logger.success("Password reset for wallet {}", mask_address(address))
        self._reconcile(address, state.new_password)
        return SubmissionOutcome(navigation=Navigation(SIGN_IN, self.redirect_delay))

    def _reconcile(self, address: str, new_password: str) -> None:
        # The server already accepted the new password; local bookkeeping must not undo that
        try:
            self.wallets.remember_password(address, new_password)
        except StoreError as exc:
            logger.warning("Could not update local wallet password entry: {}", exc)
        try:
            self.cache.clear(RECOVERED_WALLET_KEY)
        except StoreError as exc:
            logger.warning("Could not clear recovered wallet entry: {}", exc)
