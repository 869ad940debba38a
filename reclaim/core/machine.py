"""Recovery wizard state machine.

Two layers:

* :func:`reduce` — pure ``(state, event) -> state``. Every transition,
  including the arrival of an asynchronous result, is an event.
* :class:`RecoveryWizard` — the driver. Runs the synchronous validators,
  issues gateway calls for the steps that need them, and feeds the results
  back through :func:`reduce`.

Asynchronous results carry the ``generation`` they were started under.
Starting a gate, resetting, choosing a mode and backing out past step 1
all bump the generation, so a response that arrives after the user moved on
is discarded by the reducer instead of landing on the wrong step.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Union

from loguru import logger

from . import rules
from .errors import GatewayError, StoreError
from .gateway import RecoveryGateway
from .log import mask_address
from .state import (
    EDITABLE_FIELDS,
    FIELD_MANUAL_ADDRESS,
    FIELD_RECOVERY_PHRASE,
    FIELD_SELECTED_WALLET,
    RECOVERY_STEPS,
    STEP_FIRST,
    STEP_MODE,
    PendingFlags,
    RecoveryMode,
    WalletInputMode,
    WalletSummary,
    WizardState,
    initial_state,
)
from .store import RECOVERED_WALLET_KEY, MemoryCache, TransientCache, WalletDirectory, summary_to_record
from .submission import Navigation, SubmissionCoordinator
from .taxonomy import DEFAULT_NOTICE_SECONDS, MappedError, Operation, map_failure, mismatch

PENDING_VERIFYING = "verifying_wallet"
PENDING_RECOVERING = "recovering_wallet"
PENDING_SUBMITTING = "submitting"


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WalletsLoaded:
    wallets: tuple[WalletSummary, ...]


@dataclass(frozen=True)
class ModeSelected:
    mode: RecoveryMode


@dataclass(frozen=True)
class FieldEdited:
    field_id: str
    value: str


@dataclass(frozen=True)
class WalletInputModeChanged:
    input_mode: WalletInputMode


@dataclass(frozen=True)
class ValidationFailed:
    errors: dict[str, str]


@dataclass(frozen=True)
class GateStarted:
    flag: str


@dataclass(frozen=True)
class GateSucceeded:
    generation: int
    recovered_wallet: WalletSummary | None = None


@dataclass(frozen=True)
class GateFailed:
    generation: int
    errors: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SteppedForward:
    pass


@dataclass(frozen=True)
class SteppedBack:
    pass


@dataclass(frozen=True)
class Submitted:
    generation: int


@dataclass(frozen=True)
class WizardReset:
    pass


Event = Union[
    WalletsLoaded, ModeSelected, FieldEdited, WalletInputModeChanged,
    ValidationFailed, GateStarted, GateSucceeded, GateFailed,
    SteppedForward, SteppedBack, Submitted, WizardReset,
]

_FIELD_ATTRS = {FIELD_SELECTED_WALLET: "selected_wallet_id"}


def _blank(state: WizardState) -> WizardState:
    return WizardState(
        available_wallets=state.available_wallets,
        generation=state.generation + 1,
    )


def _forward(state: WizardState) -> WizardState:
    return replace(
        state,
        step=min(state.step + 1, state.total_steps),
        field_errors={},
        pending=PendingFlags(),
    )


def reduce(state: WizardState, event: Event) -> WizardState:
    """Apply ``event`` to ``state``. Disallowed events return ``state`` unchanged."""
    if isinstance(event, WalletsLoaded):
        return replace(state, available_wallets=tuple(event.wallets))

    if isinstance(event, WizardReset):
        return _blank(state)

    if isinstance(event, (GateSucceeded, GateFailed, Submitted)):
        if event.generation != state.generation:
            return state
        if isinstance(event, GateFailed):
            cleared = replace(state, pending=PendingFlags())
            return cleared.with_errors(event.errors)
        if isinstance(event, Submitted):
            return replace(state, submitted=True, field_errors={}, pending=PendingFlags())
        advanced = _forward(state)
        if event.recovered_wallet is not None and state.mode == RecoveryMode.FORGOT_WALLET:
            advanced = replace(advanced, recovered_wallet=event.recovered_wallet)
        return advanced

    # Everything below is user input: frozen while a call is in flight or after success
    if state.pending.any or state.submitted:
        return state

    if isinstance(event, ModeSelected):
        if state.step != STEP_MODE or event.mode == RecoveryMode.UNSELECTED:
            return state
        return replace(
            _blank(state),
            mode=event.mode,
            total_steps=RECOVERY_STEPS,
            step=STEP_FIRST,
        )

    if isinstance(event, FieldEdited):
        if event.field_id not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown field: {event.field_id!r}")
        if event.field_id not in state.editable_fields:
            return state
        attr = _FIELD_ATTRS.get(event.field_id, event.field_id)
        changed = replace(state, **{attr: event.value})
        if event.field_id == FIELD_RECOVERY_PHRASE and state.mode == RecoveryMode.FORGOT_WALLET:
            changed = replace(changed, recovered_wallet=None)
        return changed.without_error(event.field_id)

    if isinstance(event, WalletInputModeChanged):
        if state.mode != RecoveryMode.KNOWN_WALLET or state.step != STEP_FIRST:
            return state
        changed = replace(state, wallet_input_mode=event.input_mode)
        return changed.without_error(FIELD_SELECTED_WALLET).without_error(FIELD_MANUAL_ADDRESS)

    if isinstance(event, ValidationFailed):
        return state.with_errors(event.errors)

    if isinstance(event, GateStarted):
        return replace(
            state,
            pending=replace(PendingFlags(), **{event.flag: True}),
            generation=state.generation + 1,
        )

    if isinstance(event, SteppedForward):
        return _forward(state)

    if isinstance(event, SteppedBack):
        if state.step == STEP_FIRST:
            return _blank(state)
        if state.step > STEP_FIRST:
            return replace(state, step=state.step - 1)
        return state

    raise TypeError(f"Unhandled event: {event!r}")


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Notice:
    """Transient, dismissable message for the user."""

    message: str
    severity: str = "information"
    timeout: float = DEFAULT_NOTICE_SECONDS

    @classmethod
    def from_error(cls, error: MappedError) -> Notice:
        return cls(error.message, "error", error.notice_timeout)


@dataclass(frozen=True)
class StepResult:
    accepted: bool
    notice: Notice | None = None
    navigation: Navigation | None = None


REFUSED = StepResult(False)

MSG_PASSWORD_RESET = "Password reset successfully! You can now sign in with your new password."
MSG_WALLET_FOUND = "Wallet found: {name}"


class RecoveryWizard:
    """Owns the wizard state and performs every transition on it."""

    def __init__(
        self,
        gateway: RecoveryGateway,
        cache: TransientCache | None = None,
        wallets: WalletDirectory | None = None,
        redirect_delay: float = 2.0,
    ) -> None:
        self.gateway = gateway
        self.cache = cache if cache is not None else MemoryCache()
        self.wallets = wallets if wallets is not None else WalletDirectory(self.cache)
        self.coordinator = SubmissionCoordinator(gateway, self.cache, self.wallets, redirect_delay)
        self._state = initial_state()
        self._listeners: list[Callable[[WizardState], None]] = []

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state.pending.any

    def subscribe(self, listener: Callable[[WizardState], None]) -> None:
        self._listeners.append(listener)

    def dispatch(self, event: Event) -> WizardState:
        before = self._state
        self._state = reduce(before, event)
        if self._state is not before:
            logger.trace("{} -> step {}", type(event).__name__, self._state.step)
            for listener in self._listeners:
                listener(self._state)
        return self._state

    # -- user transitions ---------------------------------------------------

    def load_wallets(self) -> tuple[WalletSummary, ...]:
        wallets = self.wallets.list_wallets()
        self.dispatch(WalletsLoaded(wallets))
        return wallets

    def select_mode(self, mode: RecoveryMode) -> StepResult:
        before = self._state
        after = self.dispatch(ModeSelected(mode))
        if after is before:
            return REFUSED
        logger.info("Recovery mode: {}", mode.value)
        return StepResult(True)

    def edit(self, field_id: str, value: str) -> StepResult:
        before = self._state
        return StepResult(self.dispatch(FieldEdited(field_id, value)) is not before)

    def set_wallet_input_mode(self, input_mode: WalletInputMode) -> StepResult:
        before = self._state
        return StepResult(self.dispatch(WalletInputModeChanged(input_mode)) is not before)

    def retreat(self) -> StepResult:
        before = self._state
        if before.step == STEP_FIRST and not before.pending.any and not before.submitted:
            self._forget_lookup()
        return StepResult(self.dispatch(SteppedBack()) is not before)

    def reset(self) -> StepResult:
        """Full reset; always allowed, supersedes any call in flight."""
        self.dispatch(WizardReset())
        self._forget_lookup()
        return StepResult(True)

    async def advance(self) -> StepResult:
        state = self._state
        if state.pending.any or state.submitted or state.step == STEP_MODE:
            return REFUSED
        if state.is_final_step:
            return await self.submit()

        errors = rules.validate(state.mode, state.step, state)
        if errors:
            self.dispatch(ValidationFailed(rules.errors_by_field(errors)))
            return StepResult(False, Notice(errors[0].message, "error"))

        if state.mode == RecoveryMode.KNOWN_WALLET:
            if state.step == 1 and state.wallet_input_mode == WalletInputMode.MANUAL:
                return await self._verify_wallet(state.manual_address.strip())
            if state.step == 2:
                return await self._match_phrase(state.recovery_phrase, state.target_address)
        elif state.mode == RecoveryMode.FORGOT_WALLET and state.step == 1:
            return await self._find_wallet(state.recovery_phrase)

        self.dispatch(SteppedForward())
        return StepResult(True)

    async def submit(self) -> StepResult:
        state = self._state
        if not state.is_final_step or state.pending.any or state.submitted:
            return REFUSED
        errors = self.coordinator.check(state)
        if errors:
            self.dispatch(ValidationFailed(rules.errors_by_field(errors)))
            return StepResult(False, Notice(errors[0].message, "error"))

        generation = self._begin(PENDING_SUBMITTING)
        outcome = await self.coordinator.submit(state)
        if self._stale(generation):
            return REFUSED
        if outcome.errors:
            self.dispatch(GateFailed(generation, rules.errors_by_field(outcome.errors)))
            return StepResult(False, Notice(outcome.errors[0].message, "error"))
        if outcome.failure is not None:
            return self._fail(generation, outcome.failure)
        self.dispatch(Submitted(generation))
        return StepResult(True, Notice(MSG_PASSWORD_RESET), outcome.navigation)

    # -- asynchronous gates -------------------------------------------------

    async def _verify_wallet(self, address: str) -> StepResult:
        generation = self._begin(PENDING_VERIFYING)
        try:
            await self.gateway.wallet_exists(address)
        except GatewayError as exc:
            return self._fail(generation, map_failure(Operation.WALLET_EXISTS, exc))
        return self._succeed(generation)

    async def _match_phrase(self, phrase: str, expected_address: str) -> StepResult:
        generation = self._begin(PENDING_RECOVERING)
        try:
            found = await self.gateway.lookup_by_mnemonic(phrase)
        except GatewayError as exc:
            return self._fail(generation, map_failure(Operation.LOOKUP, exc))
        if found.address.strip().lower() != expected_address.strip().lower():
            logger.info(
                "Recovery phrase belongs to {}, not {}",
                mask_address(found.address), mask_address(expected_address),
            )
            return self._fail(generation, mismatch(Operation.LOOKUP))
        if not self._stale(generation):
            self._remember_lookup(found)
        return self._succeed(generation)

    async def _find_wallet(self, phrase: str) -> StepResult:
        generation = self._begin(PENDING_RECOVERING)
        try:
            found = await self.gateway.lookup_by_mnemonic(phrase)
        except GatewayError as exc:
            return self._fail(generation, map_failure(Operation.LOOKUP, exc))
        if not self._stale(generation):
            self._remember_lookup(found)
        result = self._succeed(generation, found)
        if not result.accepted:
            return result
        return StepResult(True, Notice(MSG_WALLET_FOUND.format(name=found.name)))

    # -- helpers ------------------------------------------------------------

    def _begin(self, flag: str) -> int:
        return self.dispatch(GateStarted(flag)).generation

    def _stale(self, generation: int) -> bool:
        if generation != self._state.generation:
            logger.debug("Discarding response from superseded request (generation {})", generation)
            return True
        return False

    def _succeed(self, generation: int, recovered: WalletSummary | None = None) -> StepResult:
        if self._stale(generation):
            return REFUSED
        self.dispatch(GateSucceeded(generation, recovered))
        return StepResult(True)

    def _fail(self, generation: int, error: MappedError) -> StepResult:
        if self._stale(generation):
            return REFUSED
        self.dispatch(GateFailed(generation, {error.field_id: error.message}))
        return StepResult(False, Notice.from_error(error))

    def _remember_lookup(self, wallet: WalletSummary) -> None:
        try:
            self.cache.put(RECOVERED_WALLET_KEY, summary_to_record(wallet))
        except StoreError as exc:
            logger.warning("Could not cache recovered wallet: {}", exc)

    def _forget_lookup(self) -> None:
        try:
            self.cache.clear(RECOVERED_WALLET_KEY)
        except StoreError as exc:
            logger.warning("Could not clear recovered wallet entry: {}", exc)
