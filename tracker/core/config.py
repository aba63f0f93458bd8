from pydantic import BaseModel
import logging
import os

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("sql", "dynamodb", "memory")
PASSKEY_SCHEMES = ("plaintext", "pbkdf2_sha256")


class Settings(BaseModel):
    ENV: str = os.getenv("ENV", "dev").lower()  # local, dev, staging, prod

    # Collection names for the two persistent collections
    DEVICE_TABLE: str = os.getenv("DEVICE_TABLE", "devices")
    LOCATION_TABLE: str = os.getenv("LOCATION_TABLE", "locations")

    # Storage collaborator: sql (SQLAlchemy), dynamodb (boto3) or memory
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "sql").lower()
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./tracker.db")
    AWS_REGION: str = os.getenv("AWS_REGION", os.getenv("AWS_DEFAULT_REGION", "us-east-1"))
    DYNAMODB_ENDPOINT_URL: str = os.getenv("DYNAMODB_ENDPOINT_URL", "")  # e.g. http://localhost:8000 for DynamoDB Local

    # How passkeys are stored at registration. Existing records verify under either scheme.
    PASSKEY_SCHEME: str = os.getenv("PASSKEY_SCHEME", "plaintext").lower()

    MAX_REQUEST_BYTES: int = int(os.getenv("MAX_REQUEST_BYTES", "65536"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def key_schema(self) -> dict:
        """Key attribute per collection, as expected by the table stores."""
        return {
            self.DEVICE_TABLE: "deviceID",
            self.LOCATION_TABLE: "readingID",
        }

    @property
    def is_prod(self) -> bool:
        return self.ENV in {"prod", "production"}


settings = Settings()


def validate_config(config: Settings = None):
    """Validate configuration at startup. Raises ValueError if invalid."""
    config = config or settings
    errors = []

    if config.STORAGE_BACKEND not in STORAGE_BACKENDS:
        errors.append(
            f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}, got '{config.STORAGE_BACKEND}'"
        )
    if config.PASSKEY_SCHEME not in PASSKEY_SCHEMES:
        errors.append(
            f"PASSKEY_SCHEME must be one of {', '.join(PASSKEY_SCHEMES)}, got '{config.PASSKEY_SCHEME}'"
        )
    if not config.DEVICE_TABLE or not config.LOCATION_TABLE:
        errors.append("DEVICE_TABLE and LOCATION_TABLE must be set")
    elif config.DEVICE_TABLE == config.LOCATION_TABLE:
        errors.append("DEVICE_TABLE and LOCATION_TABLE must name different collections")
    if config.MAX_REQUEST_BYTES <= 0:
        errors.append("MAX_REQUEST_BYTES must be positive")

    # Production safety gates
    if config.is_prod:
        if config.STORAGE_BACKEND == "memory":
            errors.append("STORAGE_BACKEND=memory is not allowed in production")
        if config.STORAGE_BACKEND == "sql" and config.DATABASE_URL.startswith("sqlite"):
            errors.append("SQLite database is not supported in production")

    if errors:
        error_msg = "Invalid configuration: " + "; ".join(errors)
        logger.error(error_msg)
        raise ValueError(error_msg)

    logger.info(
        "Configuration validated (env=%s, storage=%s, passkey_scheme=%s)",
        config.ENV, config.STORAGE_BACKEND, config.PASSKEY_SCHEME,
    )
