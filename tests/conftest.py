"""Shared fixtures: a scripted in-memory recovery service and a wizard bound to it."""

import asyncio

import pytest

from reclaim.core.errors import GatewayError
from reclaim.core.gateway import RecoveryGateway
from reclaim.core.machine import RecoveryWizard
from reclaim.core.state import WalletSummary
from reclaim.core.store import WALLETS_KEY, MemoryCache

ADDRESS = "0x1234567890abcdef1234567890abcdef12345678"
OTHER_ADDRESS = "0xfedcba0987654321fedcba0987654321fedcba09"
PHRASE = "abandon ability able about above absent absorb abstract absurd abuse access accident"
PASSWORD = "N3w-Passw0rd!"

LOCAL_WALLETS = [
    {"id": "w1", "name": "Main", "address": ADDRESS, "createdAt": "2024-01-02"},
    {"id": "w2", "name": "Savings", "address": OTHER_ADDRESS},
]


class FakeGateway(RecoveryGateway):
    """Records every call; failures and results are set per test.

    Set ``hold`` to an :class:`asyncio.Event` to keep calls pending until
    the test releases them.
    """

    def __init__(self):
        self.calls = []
        self.exists_error = None
        self.lookup_error = None
        self.overwrite_error = None
        self.found = WalletSummary(id=ADDRESS, name="Main", address=ADDRESS)
        self.hold = None
        self.closed = False

    async def _wait(self):
        if self.hold is not None:
            await self.hold.wait()

    async def wallet_exists(self, address):
        self.calls.append(("wallet_exists", address))
        await self._wait()
        if self.exists_error is not None:
            raise self.exists_error

    async def lookup_by_mnemonic(self, phrase):
        self.calls.append(("lookup_by_mnemonic", phrase))
        await self._wait()
        if self.lookup_error is not None:
            raise self.lookup_error
        return self.found

    async def overwrite_password(self, phrase, wallet_address, new_password):
        self.calls.append(("overwrite_password", phrase, wallet_address, new_password))
        await self._wait()
        if self.overwrite_error is not None:
            raise self.overwrite_error

    async def aclose(self):
        self.closed = True

    def names(self):
        return [call[0] for call in self.calls]


def http_error(status, message=""):
    payload = {"success": False, "error": message} if message else None
    return GatewayError(status, payload)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def cache():
    return MemoryCache({WALLETS_KEY: [dict(record) for record in LOCAL_WALLETS]})


@pytest.fixture
def wizard(gateway, cache):
    wiz = RecoveryWizard(gateway, cache)
    wiz.load_wallets()
    return wiz


async def settle():
    """Let pending tasks run up to their next await point."""
    for _ in range(5):
        await asyncio.sleep(0)
