from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Healthcare Relations API"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Payload limits
    MAX_DOCUMENTS_PER_REQUEST: int = 25
    MAX_ENTITIES_PER_DOCUMENT: int = 1000
    MAX_RELATIONS_PER_DOCUMENT: int = 5000

    # Bump to invalidate cached resolutions
    RESOLVER_VERSION: str = "v1"

    # Redis / Cache
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_TTL_SECONDS: int = 3600
    ENABLE_CACHE: bool = True


settings = Settings()
