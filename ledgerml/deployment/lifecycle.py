"""
Lifecycle of a single ledger write.

Every write goes through the same notifications:

1. ``notify(description)`` while the account holder is asked to approve it
2. that notification is dismissed as soon as the write is submitted
3. on failure, the pending notification (if still shown) is dismissed, an
   error notification is shown and :class:`OperationRejected` is raised

Each ``notify`` for the pending prompt is matched by exactly one dismiss.
"""

import logging
import time
from contextlib import aclosing
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..errors import OperationRejected
from ..ledger.base import EventKind, LedgerError, Receipt, Submission
from .hooks import DeploymentHooks, Severity

logger = logging.getLogger(__name__)

WriteCall = Callable[[], Submission]


@dataclass
class Operation:
    """One ledger write and how to describe it."""
    description: str
    error_description: str
    call: WriteCall
    # Only the genesis write records its hash, under this kind.
    record_as: Optional[str] = None


class _PendingNotice:
    """The approval prompt of one write; dismissed at most once."""

    def __init__(self, hooks: DeploymentHooks, key: Any):
        self.hooks = hooks
        self.key = key
        self.dismissed = False

    def dismiss(self) -> None:
        if not self.dismissed:
            self.dismissed = True
            self.hooks.dismiss_notification(self.key)


class OperationRunner:
    """
    Executes :class:`Operation` objects with the standard notifications.

    Usage:
        runner = OperationRunner(hooks)
        receipt = await runner.run(Operation(
            description="Please accept the prompt to ...",
            error_description="Error ...",
            call=lambda: contract.send("addClass", args, sender=account, gas=GAS_LIMIT),
        ))
    """

    def __init__(self, hooks: DeploymentHooks):
        self.hooks = hooks

        # Metrics
        self._submitted = 0
        self._confirmed = 0
        self._failed = 0

    async def run(self, operation: Operation) -> Receipt:
        """
        Run one write to confirmation.

        Returns:
            The write's receipt

        Raises:
            OperationRejected: if the write failed for any reason; the
                original error is available as ``cause`` and ``__cause__``
        """
        notice = _PendingNotice(self.hooks, self.hooks.notify(operation.description))
        started = time.monotonic()

        try:
            receipt = await self._drive(operation, notice)
        except Exception as e:
            self._failed += 1
            notice.dismiss()
            self.hooks.notify(operation.error_description, Severity.ERROR)
            logger.error(f"{operation.error_description}: {e}")
            if isinstance(e, OperationRejected):
                raise
            raise OperationRejected(operation.description, e) from e

        notice.dismiss()
        self._confirmed += 1
        logger.debug(
            f"Confirmed {receipt.transaction_hash} in {time.monotonic() - started:.1f}s "
            f"(gas used: {receipt.gas_used})"
        )
        return receipt

    async def _drive(self, operation: Operation, notice: _PendingNotice) -> Receipt:
        async with aclosing(operation.call()) as events:
            async for event in events:
                if event.kind is EventKind.SUBMITTED:
                    self._submitted += 1
                    notice.dismiss()
                    logger.info(f"Submitted {event.transaction_hash}")
                    if operation.record_as:
                        self.hooks.notify(
                            f"Submitted the {operation.record_as} with transaction hash: "
                            f"{event.transaction_hash}. Please wait for a deployment confirmation."
                        )
                        self.hooks.save_transaction_hash(operation.record_as, event.transaction_hash)
                elif event.kind is EventKind.CONFIRMED:
                    if event.receipt is None:
                        raise LedgerError("Confirmation without a receipt")
                    return event.receipt
                else:
                    cause = event.error or LedgerError("Write failed")
                    raise OperationRejected(operation.description, cause) from cause

        raise LedgerError("Ledger stopped reporting before the write was confirmed")

    def stats(self) -> dict:
        """Get runner statistics."""
        return {
            "submitted": self._submitted,
            "confirmed": self._confirmed,
            "failed": self._failed,
        }
