"""
HTTP gateway ledger client.

Talks JSON to a signing gateway that holds the account keys, prompts the
account holder for approval and relays writes to the ledger.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

import aiohttp

from ..config import GatewayConfig
from .base import (
    ContractArtifact,
    LedgerClient,
    LedgerError,
    Receipt,
    Submission,
    TxEvent,
)

logger = logging.getLogger(__name__)


class GatewayLedger(LedgerClient):
    """
    Ledger client backed by an HTTP signing gateway.

    Usage:
        ledger = GatewayLedger(GatewayConfig(host="localhost", port=8545))

        async for event in ledger.deploy(artifact, args, sender=account, gas=GAS_LIMIT):
            print(event.kind, event.transaction_hash)

        await ledger.close()
    """

    def __init__(self, config: Optional[GatewayConfig] = None):
        self.config = config or GatewayConfig()
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout)
            )
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def health_check(self) -> bool:
        """Check if the gateway is reachable."""
        try:
            session = await self._get_session()
            async with session.get(f"{self.config.base_url}/health") as resp:
                return resp.status == 200
        except (aiohttp.ClientError, asyncio.TimeoutError):
            return False

    def deploy(
        self,
        artifact: ContractArtifact,
        args: List[Any],
        *,
        sender: str,
        gas: int,
    ) -> Submission:
        payload = {
            "contract": artifact.name,
            "abi": artifact.abi,
            "bytecode": artifact.bytecode,
            "args": args,
            "from": sender,
            "gas": gas,
        }
        return self._submit("/contracts", payload)

    def send(
        self,
        address: str,
        artifact: ContractArtifact,
        method: str,
        args: List[Any],
        *,
        sender: str,
        gas: int,
    ) -> Submission:
        payload = {
            "abi": artifact.abi,
            "args": args,
            "from": sender,
            "gas": gas,
        }
        return self._submit(f"/contracts/{address}/methods/{method}", payload)

    async def _submit(self, path: str, payload: Dict[str, Any]) -> Submission:
        session = await self._get_session()
        failure: Optional[LedgerError] = None
        data: Dict[str, Any] = {}

        try:
            async with session.post(f"{self.config.base_url}{path}", json=payload) as resp:
                if resp.status >= 400:
                    error = await resp.text()
                    failure = LedgerError(
                        f"Gateway rejected {path}: {resp.status} {error}", code="REJECTED"
                    )
                else:
                    data = await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            failure = LedgerError(f"Gateway unreachable: {e}", code="UNREACHABLE")

        tx_hash = data.get("transactionHash")
        if failure is None and not tx_hash:
            failure = LedgerError(f"Gateway returned no transaction hash for {path}")

        if failure is not None:
            logger.warning(str(failure))
            yield TxEvent.failed(failure)
            return

        yield TxEvent.submitted(tx_hash)
        yield await self._wait_for_receipt(tx_hash)

    async def _wait_for_receipt(self, tx_hash: str) -> TxEvent:
        """Poll the gateway until the write is mined or we give up."""
        session = await self._get_session()
        url = f"{self.config.base_url}/transactions/{tx_hash}/receipt"
        deadline = time.monotonic() + self.config.receipt_timeout

        while True:
            try:
                async with session.get(url) as resp:
                    if resp.status == 404:
                        data = {"status": "pending"}
                    elif resp.status != 200:
                        error = await resp.text()
                        return TxEvent.failed(
                            LedgerError(f"Receipt lookup failed: {resp.status} {error}"),
                            transaction_hash=tx_hash,
                        )
                    else:
                        data = await resp.json()
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                # The write is already on its way; keep polling.
                logger.warning(f"Receipt poll for {tx_hash} failed: {e}")
                data = {"status": "pending"}

            status = data.get("status", "pending")
            if status == "confirmed":
                return TxEvent.confirmed(Receipt(
                    transaction_hash=tx_hash,
                    contract_address=data.get("contractAddress"),
                    gas_used=int(data.get("gasUsed") or 0),
                ))
            if status == "failed":
                return TxEvent.failed(
                    LedgerError(data.get("error") or f"Transaction {tx_hash} reverted", code="REVERTED"),
                    transaction_hash=tx_hash,
                )

            if time.monotonic() >= deadline:
                return TxEvent.failed(
                    LedgerError(
                        f"Transaction {tx_hash} was not mined within {self.config.receipt_timeout}s",
                        code="TIMEOUT",
                    ),
                    transaction_hash=tx_hash,
                )
            await asyncio.sleep(self.config.poll_interval)
