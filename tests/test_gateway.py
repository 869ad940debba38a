"""Tests for the HTTP recovery gateway, using httpx.MockTransport."""

import json

import httpx
import pytest

from reclaim.core.errors import GatewayError
from reclaim.core.gateway import (
    EXISTS_PATH,
    FIND_PATH,
    RECOVER_PATH,
    FoundWallet,
    HttpRecoveryGateway,
)

BASE = "http://recovery.test/api"
ADDRESS = "0x1234567890abcdef1234567890abcdef12345678"


def _gateway(handler):
    return HttpRecoveryGateway(BASE, timeout=5, transport=httpx.MockTransport(handler))


def _recorder(status=200, body=None):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(status, json=body if body is not None else {"success": True})

    return handler, seen


class TestRequests:

    @pytest.mark.asyncio
    async def test_wallet_exists_posts_address(self):
        handler, seen = _recorder()
        async with _gateway(handler) as gw:
            await gw.wallet_exists(f"  {ADDRESS} ")
        assert seen[0].method == "POST"
        assert seen[0].url.path == "/api" + EXISTS_PATH
        assert json.loads(seen[0].content) == {"walletAddress": ADDRESS}

    @pytest.mark.asyncio
    async def test_lookup_decodes_wallet(self):
        body = {
            "success": True,
            "data": {"walletAddress": ADDRESS, "walletName": "Savings", "createdAt": "2024-05-01"},
        }
        handler, seen = _recorder(body=body)
        async with _gateway(handler) as gw:
            wallet = await gw.lookup_by_mnemonic(" one two  ")
        assert seen[0].url.path == "/api" + FIND_PATH
        assert json.loads(seen[0].content) == {"mnemonic": "one two"}
        assert wallet.address == ADDRESS
        assert wallet.name == "Savings"
        assert wallet.created_at == "2024-05-01"

    @pytest.mark.asyncio
    async def test_lookup_without_name(self):
        handler, _ = _recorder(body={"success": True, "data": {"walletAddress": ADDRESS}})
        async with _gateway(handler) as gw:
            wallet = await gw.lookup_by_mnemonic("phrase")
        assert wallet.name == "Recovered wallet"
        assert wallet.id == ADDRESS

    @pytest.mark.asyncio
    async def test_overwrite_body(self):
        handler, seen = _recorder()
        async with _gateway(handler) as gw:
            await gw.overwrite_password("a b c", ADDRESS, "N3w-Passw0rd!")
        assert seen[0].url.path == "/api" + RECOVER_PATH
        assert json.loads(seen[0].content) == {
            "mnemonic": "a b c",
            "walletAddress": ADDRESS,
            "newPassword": "N3w-Passw0rd!",
        }


class TestFailures:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 404, 429, 500])
    async def test_error_status_raises(self, status):
        handler, _ = _recorder(status=status, body={"success": False, "error": "nope"})
        async with _gateway(handler) as gw:
            with pytest.raises(GatewayError) as excinfo:
                await gw.overwrite_password("a", ADDRESS, "b")
        assert excinfo.value.status == status
        assert excinfo.value.payload["error"] == "nope"
        assert excinfo.value.detail == "nope"

    @pytest.mark.asyncio
    async def test_non_json_error_body(self):
        def handler(request):
            return httpx.Response(502, text="<html>Bad gateway</html>")

        async with _gateway(handler) as gw:
            with pytest.raises(GatewayError) as excinfo:
                await gw.wallet_exists(ADDRESS)
        assert excinfo.value.status == 502
        assert excinfo.value.payload == {}

    @pytest.mark.asyncio
    async def test_transport_failure_has_no_status(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with _gateway(handler) as gw:
            with pytest.raises(GatewayError) as excinfo:
                await gw.wallet_exists(ADDRESS)
        assert excinfo.value.status is None
        assert excinfo.value.is_transport_failure

    @pytest.mark.asyncio
    async def test_malformed_lookup_body(self):
        handler, _ = _recorder(body={"success": True, "data": {"name": "no address"}})
        async with _gateway(handler) as gw:
            with pytest.raises(GatewayError) as excinfo:
                await gw.lookup_by_mnemonic("phrase")
        assert excinfo.value.status == 200
        assert not excinfo.value.is_transport_failure


class TestFoundWallet:

    def test_extra_fields_ignored(self):
        found = FoundWallet.model_validate({"walletAddress": ADDRESS, "balance": 12})
        assert found.to_summary().address == ADDRESS

    def test_empty_address_rejected(self):
        with pytest.raises(ValueError):
            FoundWallet.model_validate({"walletAddress": ""})
