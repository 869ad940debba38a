"""Gateway failure taxonomy.

The same HTTP status means different things depending on which call failed
(a 500 from the lookup means the phrase is invalid, a 500 from the overwrite
means the phrase does not belong to the wallet). All of that lives in the
one table below; call sites only ever see a :class:`MappedError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import GatewayError
from .state import (
    FIELD_MANUAL_ADDRESS,
    FIELD_NEW_PASSWORD,
    FIELD_RECOVERY_PHRASE,
)


class Operation(Enum):
    WALLET_EXISTS = "wallet_exists"
    LOOKUP = "lookup_by_mnemonic"
    OVERWRITE = "overwrite_password"


class ErrorKind(Enum):
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    INVALID_FORMAT = "invalid_format"
    PHRASE_MISMATCH = "phrase_mismatch"
    SERVER_FAULT = "server_fault"
    NETWORK_FAILURE = "network_failure"


DEFAULT_NOTICE_SECONDS = 4.0
RATE_LIMITED_NOTICE_SECONDS = 10.0


@dataclass(frozen=True)
class MappedError:
    field_id: str
    message: str
    kind: ErrorKind

    @property
    def notice_timeout(self) -> float:
        if self.kind == ErrorKind.RATE_LIMITED:
            return RATE_LIMITED_NOTICE_SECONDS
        return DEFAULT_NOTICE_SECONDS


# (operation, status) -> kind
STATUS_KINDS: dict[tuple[Operation, int], ErrorKind] = {
    (Operation.WALLET_EXISTS, 400): ErrorKind.INVALID_FORMAT,
    (Operation.WALLET_EXISTS, 404): ErrorKind.NOT_FOUND,
    (Operation.WALLET_EXISTS, 429): ErrorKind.RATE_LIMITED,
    (Operation.LOOKUP, 400): ErrorKind.INVALID_FORMAT,
    (Operation.LOOKUP, 404): ErrorKind.NOT_FOUND,
    (Operation.LOOKUP, 429): ErrorKind.RATE_LIMITED,
    (Operation.LOOKUP, 500): ErrorKind.INVALID_FORMAT,
    (Operation.OVERWRITE, 400): ErrorKind.INVALID_FORMAT,
    (Operation.OVERWRITE, 401): ErrorKind.PHRASE_MISMATCH,
    (Operation.OVERWRITE, 404): ErrorKind.NOT_FOUND,
    (Operation.OVERWRITE, 429): ErrorKind.RATE_LIMITED,
    (Operation.OVERWRITE, 500): ErrorKind.PHRASE_MISMATCH,
}

# Field that carries the message when the kind does not pick one itself
DEFAULT_FIELDS = {
    Operation.WALLET_EXISTS: FIELD_MANUAL_ADDRESS,
    Operation.LOOKUP: FIELD_RECOVERY_PHRASE,
    Operation.OVERWRITE: FIELD_NEW_PASSWORD,
}

MESSAGES: dict[tuple[Operation, ErrorKind], str] = {
    (Operation.WALLET_EXISTS, ErrorKind.NOT_FOUND):
        "This wallet address is not registered",
    (Operation.WALLET_EXISTS, ErrorKind.INVALID_FORMAT):
        "Invalid wallet address format",
    (Operation.LOOKUP, ErrorKind.NOT_FOUND):
        "No wallet found for this recovery phrase",
    (Operation.LOOKUP, ErrorKind.INVALID_FORMAT):
        "Invalid recovery phrase. Check that every word is spelled correctly and in order",
    (Operation.LOOKUP, ErrorKind.PHRASE_MISMATCH):
        "This recovery phrase doesn't match the selected wallet",
    (Operation.OVERWRITE, ErrorKind.NOT_FOUND):
        "Wallet not found. Start the recovery again",
    (Operation.OVERWRITE, ErrorKind.INVALID_FORMAT):
        "Invalid recovery phrase format",
    (Operation.OVERWRITE, ErrorKind.PHRASE_MISMATCH):
        "Recovery phrase doesn't match this wallet",
}

GENERIC_MESSAGES = {
    ErrorKind.RATE_LIMITED: "Too many attempts. Please wait a few minutes before trying again",
    ErrorKind.SERVER_FAULT: "Something went wrong on our side. Please try again",
    ErrorKind.NETWORK_FAILURE: "Network error. Check your connection and try again",
}


def kind_for(operation: Operation, status: int | None) -> ErrorKind:
    if status is None:
        return ErrorKind.NETWORK_FAILURE
    return STATUS_KINDS.get((operation, status), ErrorKind.SERVER_FAULT)


def _server_text(error: GatewayError) -> str:
    return str(error.payload.get("error") or error.payload.get("message") or "")


def _field_for(operation: Operation, kind: ErrorKind, error: GatewayError) -> str:
    if operation != Operation.OVERWRITE:
        return DEFAULT_FIELDS[operation]
    if kind in (ErrorKind.PHRASE_MISMATCH, ErrorKind.NOT_FOUND):
        return FIELD_RECOVERY_PHRASE
    if kind == ErrorKind.INVALID_FORMAT:
        # A 400 is about either the password or the phrase; only the body says which
        if "password" in _server_text(error).lower():
            return FIELD_NEW_PASSWORD
        return FIELD_RECOVERY_PHRASE
    return DEFAULT_FIELDS[operation]


def _message_for(operation: Operation, kind: ErrorKind, field_id: str, error: GatewayError) -> str:
    if field_id == FIELD_NEW_PASSWORD and kind == ErrorKind.INVALID_FORMAT:
        # Only routed here when the server text names the password; show it as is
        return _server_text(error)
    if kind in GENERIC_MESSAGES:
        return GENERIC_MESSAGES[kind]
    return MESSAGES[(operation, kind)]


def map_failure(operation: Operation, error: GatewayError) -> MappedError:
    """Translate a gateway failure into one field-scoped, human-readable message."""
    kind = kind_for(operation, error.status)
    field_id = _field_for(operation, kind, error)
    return MappedError(field_id, _message_for(operation, kind, field_id, error), kind)


def mismatch(operation: Operation = Operation.LOOKUP) -> MappedError:
    """Local phrase/address mismatch detected after a successful lookup."""
    return MappedError(
        FIELD_RECOVERY_PHRASE,
        MESSAGES[(operation, ErrorKind.PHRASE_MISMATCH)],
        ErrorKind.PHRASE_MISMATCH,
    )

