from __future__ import annotations

from typing import Any, Mapping

from app.application.sealing import SealManager, iso_timestamp, verification_result
from integrity_shared.models.evidence import (
    EvidenceCheckDetails,
    EvidenceVerification,
    NotaryEvidence,
)
from integrity_shared.utils.logger import get_logger

logger = get_logger(__name__)


class EvidenceNotary:
    """Seals captured page snapshots and re-verifies evidence packages."""

    def __init__(self, seal_manager: SealManager | None = None):
        self._seals = seal_manager or SealManager()

    def create_evidence(
        self, source_url: str, title: str, content_html: str
    ) -> NotaryEvidence:
        seal = self._seals.create_seal(content_html)
        return NotaryEvidence(
            captured_at=iso_timestamp(self._seals.now_ms()),
            source_url=source_url,
            title=title,
            content_html=content_html,
            seal=seal,
        )

    def verify_evidence(
        self, evidence: NotaryEvidence | Mapping[str, Any]
    ) -> EvidenceVerification:
        # Signature and public key are carried through, never checked here.
        try:
            if not isinstance(evidence, NotaryEvidence):
                evidence = NotaryEvidence.model_validate(evidence)
            checks = self._seals.check_seal(evidence.content_html, evidence.seal)
        except Exception as exc:
            logger.warning("Evidence verification error", extra={"error": str(exc)})
            return EvidenceVerification(
                valid=False, reason=f"Verification error: {exc}"
            )

        result = verification_result(checks)
        return EvidenceVerification(
            valid=result.valid,
            reason=result.reason,
            details=EvidenceCheckDetails(
                content_match=checks.content_match,
                seal_intact=checks.seal_intact,
                timestamp_valid=checks.timestamp_valid,
            ),
        )
