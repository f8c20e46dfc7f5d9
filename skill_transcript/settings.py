from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=_ENV_PATH, env_file_encoding="utf-8", extra="ignore")

    ELEVENLABS_API_KEY: str | None = None
    OPENAI_API_KEY: str | None = None
    GOOGLE_API_KEY: str | None = None

    ELEVENLABS_BASE_URL: str = "https://api.elevenlabs.io/v1"
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"

    TRANSCRIPT_DEFAULT_PROVIDER: str = "openai"
    TRANSCRIPT_DEFAULT_FORMAT: str = "text"
    TRANSCRIPT_LOGS_DIR: str = "./logs"
    TRANSCRIPT_ECHO_LOGS: bool = True

    CHUNKING_ENABLED: bool = True
    CHUNK_TARGET_SECONDS: float = 600.0
    CHUNK_OVERLAP_SECONDS: float = 5.0
    MAX_PARALLEL_CHUNKS: int = 1
    REQUEST_TIMEOUT_SECONDS: float = 300.0
    MERGE_SIMILARITY_THRESHOLD: float = 0.9

    COMPRESS_OVERSIZED: bool = True
    COMPRESS_BITRATE: str = "32k"


settings = Settings()
