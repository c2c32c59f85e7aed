from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pydantic import field_validator

class Settings(BaseSettings):
    # Database settings
    POSTGRES_USER: str = 'maxcontrol_user'
    POSTGRES_PASSWORD: str = 'maxcontrol_pass'
    POSTGRES_DB: str = 'maxcontrol_db'
    POSTGRES_HOST: str = 'postgres'
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[str] = None  # Sobrescribe la URL construida con POSTGRES_*

    # JWT settings
    APP_SECRET_STRING: str = 'your-super-secret-key-here-change-in-production-2024'
    ALGORITHM: str = 'HS256'
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Usuario administrador inicial (solo si la tabla users está vacía)
    INITIAL_ADMIN_USERNAME: Optional[str] = None
    INITIAL_ADMIN_PASSWORD: Optional[str] = None

    # Cotizaciones
    QUOTE_NUMBER_PREFIX: str = 'ORC-'
    QUOTE_SEQUENCE_PADDING: int = 3
    QUOTE_NUMBER_MAX_ATTEMPTS: int = 3
    CARD_SURCHARGE_PERCENTAGE: float = 5.0

    # Dashboard
    DEFAULT_COMPANY_NAME: str = 'Sua Empresa'

    # CORS
    CORS_ORIGINS: list = ["*"]

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    model_config = SettingsConfigDict(
        extra="allow",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @field_validator("DEBUG", mode="before")
    @classmethod
    def parse_debug(cls, v):
        if isinstance(v, str):
            return v.lower().strip('"').strip("'") in ("true", "1", "yes", "on")
        return bool(v)

settings = Settings()
