import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from app.api.schemas import (
    ClustersResponse,
    CompareRequest,
    CompareResponse,
    EvidenceRequest,
    FingerprintRequest,
    FingerprintResponse,
    FingerprintSetRequest,
    SealRequest,
    SealVerifyRequest,
    SimilarPairItem,
    SimilarPairsResponse,
)
from app.application.fingerprint import hex_to_simhash
from app.application.similarity import (
    cluster_by_similarity,
    distance_to_similarity,
    find_similar_pairs,
    hamming_distance,
)
from app.core.config import get_integrity_config
from app.core.metrics import (
    FINGERPRINTS_GENERATED,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    SEAL_VERIFICATIONS,
    SEALS_CREATED,
    metrics,
)
from app.dependencies.container import evidence_notary, fingerprint_builder, seal_manager
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from integrity_shared.models.evidence import EvidenceVerification, NotaryEvidence
from integrity_shared.models.seal import (
    TimeLockSeal,
    VerificationFailure,
    VerificationResult,
)
from integrity_shared.utils.errors import IntegrityException

router = APIRouter()
config = get_integrity_config()

_VERIFICATION_LABELS = {
    None: "valid",
    VerificationFailure.CONTENT_MODIFIED.value: "content_modified",
    VerificationFailure.SEAL_TAMPERED.value: "seal_tampered",
    VerificationFailure.FUTURE_TIMESTAMP.value: "future_timestamp",
    VerificationFailure.VERIFICATION_ERROR.value: "error",
}


@contextmanager
def _observed(method: str, endpoint: str) -> Iterator[None]:
    # Failed calls are counted with their error status before the handler runs.
    start = time.perf_counter()
    status = "200"
    try:
        yield
    except IntegrityException as exc:
        status = str(exc.status_code)
        raise
    except Exception:
        status = "500"
        raise
    finally:
        REQUEST_COUNT.labels(method=method, endpoint=endpoint, status=status).inc()
        REQUEST_LATENCY.labels(method=method, endpoint=endpoint).observe(
            time.perf_counter() - start
        )


@router.get("/health", tags=["health"])
async def health() -> dict:
    return {
        "status": "healthy",
        "service": config.service_name,
        "version": "0.1.0",
    }


@router.get("/metrics", tags=["health"])
async def prometheus_metrics() -> PlainTextResponse:
    return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.post("/seals", response_model=TimeLockSeal, tags=["seals"])
async def create_seal(request: SealRequest) -> TimeLockSeal:
    with _observed("POST", "/seals"):
        seal = seal_manager.create_seal(request.content)
        SEALS_CREATED.inc()
        metrics.log_event(
            "seal_created",
            {"content_hash": seal.content_hash, "timestamp": seal.timestamp},
        )
    return seal


@router.post("/seals/verify", response_model=VerificationResult, tags=["seals"])
async def verify_seal(request: SealVerifyRequest) -> VerificationResult:
    with _observed("POST", "/seals/verify"):
        result = seal_manager.verify_seal(request.content, request.seal)
        SEAL_VERIFICATIONS.labels(result=_VERIFICATION_LABELS[result.reason]).inc()
        if not result.valid:
            metrics.log_event("seal_verification_failed", {"reason": result.reason})
    return result


@router.post("/evidence", response_model=NotaryEvidence, tags=["evidence"])
async def create_evidence(request: EvidenceRequest) -> NotaryEvidence:
    with _observed("POST", "/evidence"):
        evidence = evidence_notary.create_evidence(
            request.source_url, request.title, request.content_html
        )
        SEALS_CREATED.inc()
    return evidence


@router.post("/evidence/verify", response_model=EvidenceVerification, tags=["evidence"])
async def verify_evidence(payload: Dict[str, Any]) -> EvidenceVerification:
    with _observed("POST", "/evidence/verify"):
        result = evidence_notary.verify_evidence(payload)
    return result


@router.post("/fingerprints", response_model=FingerprintResponse, tags=["similarity"])
async def create_fingerprint(request: FingerprintRequest) -> FingerprintResponse:
    with _observed("POST", "/fingerprints"):
        fingerprint = fingerprint_builder.generate(request.text)
        FINGERPRINTS_GENERATED.inc()
    return FingerprintResponse(
        fingerprint=fingerprint.to_hex(),
        high=fingerprint.high,
        low=fingerprint.low,
    )


@router.post("/similarity/compare", response_model=CompareResponse, tags=["similarity"])
async def compare_fingerprints(request: CompareRequest) -> CompareResponse:
    with _observed("POST", "/similarity/compare"):
        distance = hamming_distance(
            hex_to_simhash(request.a, strict=True),
            hex_to_simhash(request.b, strict=True),
        )
    return CompareResponse(
        distance=distance,
        similarity=distance_to_similarity(distance),
        similar=distance <= request.threshold,
    )


@router.post("/similarity/pairs", response_model=SimilarPairsResponse, tags=["similarity"])
async def similar_pairs(request: FingerprintSetRequest) -> SimilarPairsResponse:
    with _observed("POST", "/similarity/pairs"):
        fingerprints = [hex_to_simhash(value, strict=True) for value in request.fingerprints]
        pairs = find_similar_pairs(fingerprints, request.threshold)
        metrics.log_event(
            "duplicate_scan_completed",
            {"fingerprint_count": len(fingerprints), "pair_count": len(pairs)},
        )
    return SimilarPairsResponse(
        pairs=[SimilarPairItem(i=pair.i, j=pair.j, similarity=pair.similarity) for pair in pairs]
    )


@router.post("/similarity/clusters", response_model=ClustersResponse, tags=["similarity"])
async def similarity_clusters(request: FingerprintSetRequest) -> ClustersResponse:
    with _observed("POST", "/similarity/clusters"):
        fingerprints = [hex_to_simhash(value, strict=True) for value in request.fingerprints]
        clusters = cluster_by_similarity(fingerprints, request.threshold)
    return ClustersResponse(clusters=clusters)
