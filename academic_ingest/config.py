"""Ingestion configuration loaded from environment variables.

Every value can also be overridden by a CLI flag.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


PACKAGE_DIR = Path(__file__).resolve().parent


class IngestConfig(BaseSettings):
    """Ingestion configuration loaded from environment variables.

    For local development, create a .env file in the project root.
    """

    # Term tag stored with every record (opaque to the parsers)
    semester: str = Field(
        default="2025-2026 S1",
        description="Semester/term tag attached to ingested records",
    )

    # Paths
    data_dir: Path = Field(
        default=PACKAGE_DIR / "data" / "raw",
        description="Directory holding the source documents",
    )
    store_path: Path = Field(
        default=PACKAGE_DIR / "data" / "processed" / "records.json",
        description="JSON file the ingested records are written to",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: IngestConfig | None = None


def get_config() -> IngestConfig:
    """Get the ingestion configuration singleton.

    Returns:
        IngestConfig: Ingestion configuration instance
    """
    global _config
    if _config is None:
        _config = IngestConfig()
    return _config
