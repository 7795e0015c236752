"""
Deployment errors.

A failure after the genesis operation confirmed leaves a partially deployed
model on the ledger: its address has already been saved and some classes or
chunks are present. Nothing is rolled back; the caller decides whether to
abandon the contract.
"""

from typing import Optional


class DeploymentError(Exception):
    """Base exception for deployment errors."""

    def __init__(self, message: str, code: str = "DEPLOYMENT_ERROR"):
        super().__init__(message)
        self.code = code


class PreconditionViolation(DeploymentError):
    """Model data is malformed. Raised before any ledger write."""

    def __init__(self, message: str):
        super().__init__(message, code="PRECONDITION_VIOLATION")


class UnrecognizedModelType(DeploymentError):
    """No deployment strategy or contract exists for a model type."""

    def __init__(self, model_type: str):
        super().__init__(f'Unrecognized model type: "{model_type}"', code="UNRECOGNIZED_MODEL_TYPE")
        self.model_type = model_type


class OperationRejected(DeploymentError):
    """The ledger reported failure for one write."""

    def __init__(self, description: str, cause: Optional[BaseException] = None):
        message = f"{description}: {cause}" if cause is not None else description
        super().__init__(message, code="OPERATION_REJECTED")
        self.description = description
        self.cause = cause
