"""
Integrity Shared Models - Time-Lock Seals
Point-in-time integrity proofs and their verification results
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

SEAL_FORMAT_VERSION = 1


class TimeLockSeal(BaseModel):
    """
    Merkle root of sealed content bound to a timestamp and nonce.

    Serialized with the camelCase field names used by stored evidence files.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content_hash: str = Field(..., alias="contentHash")
    timestamp: int = Field(..., description="Milliseconds since epoch")
    nonce: str
    seal_hash: str = Field(..., alias="sealHash")
    version: int = SEAL_FORMAT_VERSION

    def seal_preimage(self) -> str:
        """Colon-delimited string the seal hash is computed over."""
        return f"{self.content_hash}:{self.timestamp}:{self.nonce}"


class VerificationFailure(str, Enum):
    CONTENT_MODIFIED = "Content has been modified"
    SEAL_TAMPERED = "Seal has been tampered with"
    FUTURE_TIMESTAMP = "Timestamp is in the future"
    VERIFICATION_ERROR = "Verification error"


class VerificationResult(BaseModel):
    """Outcome of re-verifying content against a seal"""

    model_config = ConfigDict(frozen=True)

    valid: bool
    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> "VerificationResult":
        return cls(valid=True)

    @classmethod
    def failed(cls, failure: VerificationFailure) -> "VerificationResult":
        return cls(valid=False, reason=failure.value)
