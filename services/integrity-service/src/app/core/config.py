import os
from dataclasses import dataclass
from functools import lru_cache

from integrity_shared.utils.config import get_settings


@dataclass(frozen=True)
class IntegrityServiceConfig:
    service_name: str
    service_port: int
    log_level: str
    json_logs: bool
    app_env: str
    debug: bool
    # --- sealing ---
    merkle_chunk_size: int
    nonce_bytes: int
    # --- similarity ---
    similarity_threshold: int
    duplicate_threshold: int
    duplicate_min_similarity: int
    fnv_variant: str
    max_content_chars: int


def _parse_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@lru_cache()
def get_integrity_config() -> IntegrityServiceConfig:
    settings = get_settings()
    return IntegrityServiceConfig(
        service_name=os.getenv("SERVICE_NAME", settings.service_name),
        service_port=int(os.getenv("PORT", str(settings.service_port))),
        log_level=os.getenv("LOG_LEVEL", settings.log_level),
        json_logs=_parse_bool(os.getenv("JSON_LOGS"), settings.json_logs),
        app_env=os.getenv("APP_ENV", settings.app_env),
        debug=_parse_bool(os.getenv("DEBUG"), settings.debug),
        merkle_chunk_size=int(os.getenv("MERKLE_CHUNK_SIZE", "4096")),
        nonce_bytes=int(os.getenv("SEAL_NONCE_BYTES", "16")),
        similarity_threshold=int(os.getenv("SIMILARITY_THRESHOLD", "6")),
        duplicate_threshold=int(os.getenv("DUPLICATE_THRESHOLD", "3")),
        duplicate_min_similarity=int(os.getenv("DUPLICATE_MIN_SIMILARITY", "90")),
        fnv_variant=os.getenv("FNV_VARIANT", "standard"),
        max_content_chars=int(os.getenv("MAX_CONTENT_CHARS", "5000000")),
    )
