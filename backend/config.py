"""Application settings loaded from .env file."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    DB_TYPE: str = "postgresql"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "susemanager"
    DB_USER: str = "spacewalk"
    DB_PASSWORD: str = ""
    DB_FILE_PATH: str = ""
    DB_SCHEMA: str = "public"

    # Inspection
    TARGET_TABLES: str = (
        "rhnchannel,rhnchannelarch,rhnchannelerrata,rhnchannelfamily,rhnchannelfamilymembers,"
        "rhnerrata,rhnchannelproduct,suseproducts,rhnproductname,"
        "rhnpackagearch,rhnerrataseverity,rhnchecksumtype,rhnarchtype"
    )
    SEQUENCE_NAMING: str = "postgres"
    CATALOG_ADAPTER: str = "native"       # native (catalog SQL on PostgreSQL) | inspector

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def target_table_list(self) -> list[str]:
        return [t.strip() for t in self.TARGET_TABLES.split(",") if t.strip()]


settings = Settings()
