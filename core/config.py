# core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Configurações da aplicação."""

    # Aplicação
    APP_NAME: str = "Assistente Financeiro"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./financas.db"

    # Upload
    MAX_UPLOAD_MB: int = 50

    # Regras de reconciliação
    LIMIAR_DELTA_PERCENTUAL: float = 5.0  # |delta %| <= limiar => dia aprovado
    LIMIAR_TAXA_APROVACAO: float = 90.0  # taxa de dias aprovados para o mes passar
    TOLERANCIA_ANOMALIA: float = 0.02

    # CORS
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """Retorna instância cacheada das configurações."""
    return Settings()


settings = get_settings()
