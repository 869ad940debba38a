"""Recovery service boundary.

The wizard depends on three asynchronous operations it does not implement:
checking that a wallet address is registered, finding the wallet that a
recovery phrase belongs to, and overwriting the account password.

Contract:
- All methods are async
- All failures raise :class:`GatewayError` (``status=None`` for transport failures)
- No wizard logic here, only transport and response decoding
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import GatewayError
from .log import mask_address
from .state import WalletSummary

DEFAULT_API_URL = "http://localhost:3001/api"
DEFAULT_TIMEOUT = 30.0

EXISTS_PATH = "/auth/wallet/exists"
FIND_PATH = "/auth/wallet/find"
RECOVER_PATH = "/auth/wallet/recover"


class RecoveryGateway(ABC):
    """Abstract recovery service."""

    @abstractmethod
    async def wallet_exists(self, address: str) -> None:
        """Return if ``address`` is registered, raise :class:`GatewayError` otherwise."""

    @abstractmethod
    async def lookup_by_mnemonic(self, phrase: str) -> WalletSummary:
        """Find the wallet a recovery phrase belongs to."""

    @abstractmethod
    async def overwrite_password(self, phrase: str, wallet_address: str, new_password: str) -> None:
        """Replace the account password after the service verifies the phrase."""

    async def aclose(self) -> None:
        return None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


class FoundWallet(BaseModel):
    """``data`` object of a successful ``/auth/wallet/find`` response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    wallet_address: str = Field(alias="walletAddress", min_length=1)
    wallet_name: Optional[str] = Field(default=None, alias="walletName")
    created_at: Optional[str] = Field(default=None, alias="createdAt")

    def to_summary(self) -> WalletSummary:
        return WalletSummary(
            id=self.wallet_address,
            name=self.wallet_name or "Recovered wallet",
            address=self.wallet_address,
            created_at=self.created_at or "",
        )


class FindResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool = True
    data: FoundWallet


class HttpRecoveryGateway(RecoveryGateway):
    """Recovery service over HTTP (JSON envelope ``{success, data | error}``)."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST JSON and return the decoded body; every failure becomes GatewayError."""
        try:
            response = await self._client.post(path, json=payload)
        except httpx.RequestError as exc:
            logger.warning("POST {} failed before a response: {}", path, exc.__class__.__name__)
            raise GatewayError(None, detail=str(exc) or exc.__class__.__name__) from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.is_error:
            logger.info("POST {} -> {}", path, response.status_code)
            raise GatewayError(response.status_code, body)
        logger.debug("POST {} -> {}", path, response.status_code)
        return body

    async def wallet_exists(self, address: str) -> None:
        logger.info("Checking wallet {}", mask_address(address))
        await self._post(EXISTS_PATH, {"walletAddress": address.strip()})

    async def lookup_by_mnemonic(self, phrase: str) -> WalletSummary:
        body = await self._post(FIND_PATH, {"mnemonic": phrase.strip()})
        try:
            found = FindResponse.model_validate(body).data
        except ValidationError as exc:
            raise GatewayError(200, body, detail="Malformed wallet lookup response") from exc
        logger.info("Recovery phrase resolved to wallet {}", mask_address(found.wallet_address))
        return found.to_summary()

    async def overwrite_password(self, phrase: str, wallet_address: str, new_password: str) -> None:
        logger.info("Requesting password reset for wallet {}", mask_address(wallet_address))
        await self._post(
            RECOVER_PATH,
            {
                "mnemonic": phrase.strip(),
                "walletAddress": wallet_address,
                "newPassword": new_password,
            },
        )
