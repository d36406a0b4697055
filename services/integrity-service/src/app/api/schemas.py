from typing import Any, Dict, List

from app.core.config import get_integrity_config
from pydantic import BaseModel, Field

MAX_CONTENT_CHARS = get_integrity_config().max_content_chars


class SealRequest(BaseModel):
    content: str = Field(max_length=MAX_CONTENT_CHARS)


class SealVerifyRequest(BaseModel):
    content: str = Field(max_length=MAX_CONTENT_CHARS)
    # Left unvalidated so a malformed seal yields a negative result, not a 422.
    seal: Dict[str, Any]


class EvidenceRequest(BaseModel):
    source_url: str = Field(min_length=1, max_length=2048)
    title: str = Field(default="", max_length=1000)
    content_html: str = Field(max_length=MAX_CONTENT_CHARS)


class FingerprintRequest(BaseModel):
    text: str = Field(max_length=MAX_CONTENT_CHARS)


class FingerprintResponse(BaseModel):
    fingerprint: str
    high: int
    low: int


class CompareRequest(BaseModel):
    a: str
    b: str
    threshold: int = Field(default=6, ge=0, le=64)


class CompareResponse(BaseModel):
    distance: int
    similarity: int
    similar: bool


class FingerprintSetRequest(BaseModel):
    fingerprints: List[str] = Field(default_factory=list, max_length=10000)
    threshold: int = Field(default=6, ge=0, le=64)


class SimilarPairItem(BaseModel):
    i: int
    j: int
    similarity: int


class SimilarPairsResponse(BaseModel):
    pairs: List[SimilarPairItem]


class ClustersResponse(BaseModel):
    clusters: List[List[int]]
