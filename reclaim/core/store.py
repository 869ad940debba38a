"""Local keyed store.

The wizard treats local persistence as an external key-value store. Two
implementations share the :class:`TransientCache` interface: an in-memory
one (tests, throwaway sessions) and a JSON file with owner-only permissions.

Well-known keys:

``wallets``
    list of locally known wallet records (``id``, ``name``, ``address``, ``createdAt``)
``recovered_wallet``
    payload of the most recent successful phrase lookup
``wallet_<id>_password``
    per-wallet password entry
"""

from __future__ import annotations

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from loguru import logger

from .errors import StoreError
from .log import mask_address
from .state import WalletSummary

WALLETS_KEY = "wallets"
RECOVERED_WALLET_KEY = "recovered_wallet"


def wallet_password_key(wallet_id: str) -> str:
    return f"wallet_{wallet_id}_password"


class TransientCache(ABC):
    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any: ...

    @abstractmethod
    def put(self, key: str, value: Any) -> None: ...

    @abstractmethod
    def clear(self, key: str) -> None: ...


class MemoryCache(TransientCache):
    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def put(self, key: str, value: Any) -> None:
        self._data[key] = value

    def clear(self, key: str) -> None:
        self._data.pop(key, None)


class FileCache(TransientCache):
    """JSON object on disk, re-read on every access.

    Another process (the wallet app) may write the same file, so nothing is
    cached in memory between calls.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            raise StoreError(f"Cannot read store {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"Store {self.path} does not hold a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp, self.path)
        except OSError as exc:
            raise StoreError(f"Cannot write store {self.path}: {exc}") from exc

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def put(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def clear(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


def summary_to_record(wallet: WalletSummary) -> dict[str, str]:
    return {
        "id": wallet.id,
        "name": wallet.name,
        "address": wallet.address,
        "createdAt": wallet.created_at,
    }


def record_to_summary(record: dict[str, Any]) -> WalletSummary | None:
    if not isinstance(record, dict):
        return None
    wallet_id = record.get("id")
    address = record.get("address")
    if not wallet_id or not address:
        return None
    return WalletSummary(
        id=str(wallet_id),
        name=str(record.get("name") or "Wallet"),
        address=str(address),
        created_at=str(record.get("createdAt") or ""),
    )


class WalletDirectory:
    """Locally known wallets, read from the ``wallets`` key of a cache."""

    def __init__(self, cache: TransientCache) -> None:
        self.cache = cache

    def list_wallets(self) -> tuple[WalletSummary, ...]:
        records = self.cache.get(WALLETS_KEY, [])
        if not isinstance(records, list):
            logger.warning("Ignoring malformed wallet list in local store")
            return ()
        wallets = []
        for record in records:
            summary = record_to_summary(record)
            if summary is None:
                logger.warning("Skipping malformed wallet record")
                continue
            wallets.append(summary)
        return tuple(wallets)

    def find_by_address(self, address: str) -> WalletSummary | None:
        wanted = address.strip().lower()
        for wallet in self.list_wallets():
            if wallet.address.lower() == wanted:
                return wallet
        return None

    def remember_password(self, address: str, password: str) -> bool:
        """Update the password entry of the local wallet with ``address``.

        Returns ``False`` when no local record matches.
        """
        wallet = self.find_by_address(address)
        if wallet is None:
            logger.debug("No local wallet record for {}", mask_address(address))
            return False
        self.cache.put(wallet_password_key(wallet.id), password)
        logger.info("Updated local password entry for wallet {}", wallet.id)
        return True
