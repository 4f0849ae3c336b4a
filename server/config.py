# server/config.py

import os
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict


load_dotenv()


# -------------------------------
# Application Settings
# -------------------------------

class Settings(BaseModel):
    """
    Process-wide configuration.
    Built once at startup and handed to the components; never mutated afterwards.
    """
    model_config = ConfigDict(frozen=True)

    project_name: str = "duckduckgoose"
    version: str = "1.0"

    database_url: str = "sqlite:///./data/app.db"

    secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    session_ttl_minutes: int = 60 * 24

    kdf_iterations: int = 310_000
    kdf_salt_bytes: int = 16
    kdf_key_length: int = 32
    kdf_workers: int = 4
    kdf_timeout_seconds: float = 10.0

    page_size: int = 5

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            project_name=os.getenv("PROJECT_NAME", defaults.project_name),
            version=os.getenv("VERSION", defaults.version),
            database_url=os.getenv("DATABASE_URL", defaults.database_url),
            secret_key=os.getenv("SECRET_KEY", defaults.secret_key),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", defaults.jwt_algorithm),
            session_ttl_minutes=int(os.getenv("SESSION_TTL_MINUTES", defaults.session_ttl_minutes)),
            kdf_iterations=int(os.getenv("KDF_ITERATIONS", defaults.kdf_iterations)),
            kdf_salt_bytes=int(os.getenv("KDF_SALT_BYTES", defaults.kdf_salt_bytes)),
            kdf_key_length=int(os.getenv("KDF_KEY_LENGTH", defaults.kdf_key_length)),
            kdf_workers=int(os.getenv("KDF_WORKERS", defaults.kdf_workers)),
            kdf_timeout_seconds=float(os.getenv("KDF_TIMEOUT_SECONDS", defaults.kdf_timeout_seconds)),
            page_size=int(os.getenv("PAGE_SIZE", defaults.page_size)),
        )
