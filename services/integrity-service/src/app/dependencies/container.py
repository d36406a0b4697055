from contextlib import asynccontextmanager

from app.application.evidence import EvidenceNotary
from app.application.fingerprint import FingerprintBuilder
from app.application.merkle import MerkleBuilder
from app.application.sealing import SealManager
from app.application.similarity_service import SimilarityService
from app.core.config import get_integrity_config

from integrity_shared.utils.logger import get_logger

logger = get_logger(__name__)

config = get_integrity_config()
merkle_builder = MerkleBuilder(chunk_size=config.merkle_chunk_size)
seal_manager = SealManager(
    merkle_builder,
    nonce_bytes=config.nonce_bytes,
)
evidence_notary = EvidenceNotary(seal_manager)
fingerprint_builder = FingerprintBuilder(config.fnv_variant)
similarity_service = SimilarityService(
    fingerprint_builder,
    similarity_threshold=config.similarity_threshold,
    duplicate_threshold=config.duplicate_threshold,
    duplicate_min_similarity=config.duplicate_min_similarity,
)


@asynccontextmanager
async def lifespan(app):
    logger.info("Integrity service starting up")
    logger.info(
        "Integrity service config loaded",
        extra={
            "service_name": config.service_name,
            "service_port": config.service_port,
            "merkle_chunk_size": config.merkle_chunk_size,
            "fnv_variant": config.fnv_variant,
        },
    )
    yield
    logger.info("Integrity service shutting down")
