"""
Integrity Shared Library - Models Module
Pydantic models for seals and evidence
"""

from .evidence import (
    EVIDENCE_FORMAT_VERSION,
    EvidenceCheckDetails,
    EvidenceVerification,
    NotaryEvidence,
)
from .seal import (
    SEAL_FORMAT_VERSION,
    TimeLockSeal,
    VerificationFailure,
    VerificationResult,
)

__all__ = [
    # Seals
    "SEAL_FORMAT_VERSION",
    "TimeLockSeal",
    "VerificationFailure",
    "VerificationResult",
    # Evidence
    "EVIDENCE_FORMAT_VERSION",
    "NotaryEvidence",
    "EvidenceCheckDetails",
    "EvidenceVerification",
]
