from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Programme store (read-write)
    store_db_host: str = "localhost"
    store_db_port: int = 5432
    store_db_name: str = "journeydesk"
    store_db_user: str = "journeydesk"
    store_db_password: SecretStr = SecretStr("changeme")

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_key: SecretStr = SecretStr("dev-api-key-change-in-production")
    api_workers: int = 4
    api_log_level: str = "info"

    # Reporting
    default_language: str = "en"
    report_preview_limit: int = 100
    export_dir: str = "exports"

    # Seed
    seed_profile: str = "standard"
    seed_random_seed: int = 42

    @property
    def store_db_url_sync(self) -> str:
        pwd = self.store_db_password.get_secret_value()
        return (
            f"postgresql+psycopg2://{self.store_db_user}:{pwd}"
            f"@{self.store_db_host}:{self.store_db_port}"
            f"/{self.store_db_name}"
        )

    @property
    def store_db_url_async(self) -> str:
        pwd = self.store_db_password.get_secret_value()
        return (
            f"postgresql+asyncpg://{self.store_db_user}:{pwd}"
            f"@{self.store_db_host}:{self.store_db_port}"
            f"/{self.store_db_name}"
        )


settings = Settings()
