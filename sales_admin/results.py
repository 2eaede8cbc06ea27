# sales_admin/results.py
"""
Mutation outcomes returned by the editor and deletion workflow.

Pages turn these into toasts; tests assert on `status`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

GENERIC_FAILURE = "Something went wrong. Please try again."


class MutationStatus(str, Enum):
    SUCCESS = 'success'
    # Accepted but not written: the backing store does not exist yet
    NOT_PERSISTED = 'not_persisted'
    FAILED = 'failed'
    # First write landed, a dependent write failed
    PARTIAL = 'partial'


@dataclass(frozen=True)
class MutationResult:
    status: MutationStatus
    message: str
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        """What the caller is told: not-persisted writes still report success."""
        return self.status in (MutationStatus.SUCCESS, MutationStatus.NOT_PERSISTED)

    @property
    def persisted(self) -> bool:
        return self.status is MutationStatus.SUCCESS

    @classmethod
    def success(cls, message: str) -> 'MutationResult':
        return cls(MutationStatus.SUCCESS, message)

    @classmethod
    def not_persisted(cls, message: str) -> 'MutationResult':
        return cls(MutationStatus.NOT_PERSISTED, message)

    @classmethod
    def failed(cls, error: Optional[str], fallback: str = GENERIC_FAILURE) -> 'MutationResult':
        return cls(MutationStatus.FAILED, error or fallback, error)

    @classmethod
    def partial(cls, message: str, error: Optional[str]) -> 'MutationResult':
        return cls(MutationStatus.PARTIAL, message, error)
