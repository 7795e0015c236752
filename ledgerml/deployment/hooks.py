"""
Callbacks the deployer uses to talk to the outside world.

The deployer never renders notifications or stores results itself; it calls
out through a :class:`DeploymentHooks` instance.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Optional

from ..config import DEFAULT_TO_FLOAT


class Severity(str, Enum):
    """Notification severity."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class DeploymentHooks:
    """
    No-op hooks. Subclass and override what you need.

    ``notify`` returns a key that is later passed to ``dismiss_notification``.
    """

    def notify(self, message: str, severity: Severity = Severity.INFO) -> Any:
        return None

    def dismiss_notification(self, key: Any) -> None:
        pass

    def save_transaction_hash(self, kind: str, transaction_hash: str) -> None:
        pass

    def save_address(self, kind: str, address: str) -> None:
        pass


class CallbackHooks(DeploymentHooks):
    """Hooks built from plain callables. Unset callables are no-ops."""

    def __init__(
        self,
        notify: Optional[Callable[..., Any]] = None,
        dismiss_notification: Optional[Callable[[Any], None]] = None,
        save_transaction_hash: Optional[Callable[[str, str], None]] = None,
        save_address: Optional[Callable[[str, str], None]] = None,
    ):
        self._notify = notify
        self._dismiss = dismiss_notification
        self._save_hash = save_transaction_hash
        self._save_address = save_address

    def notify(self, message: str, severity: Severity = Severity.INFO) -> Any:
        if self._notify is None:
            return None
        return self._notify(message, severity)

    def dismiss_notification(self, key: Any) -> None:
        if self._dismiss is not None:
            self._dismiss(key)

    def save_transaction_hash(self, kind: str, transaction_hash: str) -> None:
        if self._save_hash is not None:
            self._save_hash(kind, transaction_hash)

    def save_address(self, kind: str, address: str) -> None:
        if self._save_address is not None:
            self._save_address(kind, address)


@dataclass
class DeployOptions:
    """Per-deployment settings."""
    account: str
    to_float: Optional[float] = None
    hooks: Optional[DeploymentHooks] = None

    def with_defaults(self) -> "DeployOptions":
        """Copy with every unset field filled in."""
        return replace(
            self,
            to_float=self.to_float if self.to_float is not None else DEFAULT_TO_FLOAT,
            hooks=self.hooks if self.hooks is not None else DeploymentHooks(),
        )
