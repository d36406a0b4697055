"""
Integrity Shared Models - Notary Evidence
Captured page content bundled with its time-lock seal
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .seal import TimeLockSeal

EVIDENCE_FORMAT_VERSION = 1


class NotaryEvidence(BaseModel):
    """Evidence package containing the captured HTML and its seal"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: int = EVIDENCE_FORMAT_VERSION
    captured_at: str = Field(..., alias="capturedAt")
    source_url: str = Field(..., alias="sourceUrl")
    title: str
    content_html: str = Field(..., alias="contentHtml")
    seal: TimeLockSeal
    # Carried through unvalidated
    signature: Optional[str] = None
    public_key: Optional[str] = Field(default=None, alias="publicKey")


class EvidenceCheckDetails(BaseModel):
    content_match: bool = Field(..., alias="contentMatch")
    seal_intact: bool = Field(..., alias="sealIntact")
    timestamp_valid: bool = Field(..., alias="timestampValid")

    model_config = ConfigDict(populate_by_name=True)


class EvidenceVerification(BaseModel):
    """Verification outcome for a NotaryEvidence package"""

    valid: bool
    reason: Optional[str] = None
    details: Optional[EvidenceCheckDetails] = None
