import os
from functools import lru_cache
from typing import Tuple, Type

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

CONFIG_FILE_ENV = "REGISTRATION_CONFIG"
DEFAULT_CONFIG_FILE = "registration.yml"


# ----------------------------
# General / App settings
# ----------------------------
class AppSettings(BaseModel):
    app_name: str = "UserRegistrationService"
    env_mode: str = "local"  # "local" or "docker"
    host: str = "127.0.0.1"
    port: int = 8000

    # Logger
    log_file: str = "app.log"
    log_level: str = "INFO"


# ----------------------------
# PostgreSQL / DB settings
# ----------------------------
class PostgresSettings(BaseModel):
    host_local: str = "127.0.0.1"
    host_docker: str = "registration_postgres"
    port: int = 5432
    user: str = "postgres"
    password: str = "password"
    db_name: str = "registration"

    # create missing tables/indexes on startup
    synchronize: bool = True
    echo: bool = False

    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30
    pool_recycle: int = 1800

    max_retries: int = 3
    retry_backoff: float = 0.5

    def get_host(self, env_mode: str) -> str:
        return self.host_docker if env_mode == "docker" else self.host_local

    def get_database_url(self, env_mode: str) -> str:
        host = self.get_host(env_mode)
        return f"postgresql+asyncpg://{self.user}:{self.password}@{host}:{self.port}/{self.db_name}"


# ----------------------------
# Redis settings
# ----------------------------
class RedisSettings(BaseModel):
    host_local: str = "127.0.0.1"
    host_docker: str = "registration_redis"
    port: int = 6379
    db: int = 0

    default_ttl: int = 600  # 10 minutes
    socket_timeout: float = 5.0

    max_retries: int = 5
    retry_backoff: float = 1.0

    def get_host(self, env_mode: str) -> str:
        return self.host_docker if env_mode == "docker" else self.host_local

    def get_url(self, env_mode: str) -> str:
        return f"redis://{self.get_host(env_mode)}:{self.port}/{self.db}"


# ----------------------------
# Kafka settings
# ----------------------------
class KafkaSettings(BaseModel):
    host_local: str = "127.0.0.1"
    host_docker: str = "registration_kafka"
    port: int = 9092

    welcome_topic: str = "welcome_queue"
    create_topics: bool = True
    num_partitions: int = 1
    replication_factor: int = 1

    max_retries: int = 5
    retry_backoff: float = 1.0

    def get_host(self, env_mode: str) -> str:
        return self.host_docker if env_mode == "docker" else self.host_local

    def get_bootstrap_servers(self, env_mode: str) -> str:
        return f"{self.get_host(env_mode)}:{self.port}"


# ----------------------------
# Top-level settings
# ----------------------------
class Settings(BaseSettings):
    """
    Service configuration.

    Sources, highest precedence first: init kwargs, environment
    (``POSTGRES__PORT=5433``), ``.env``, then the YAML file named by
    ``REGISTRATION_CONFIG`` (default ``registration.yml``).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=AppSettings)
    postgres: PostgresSettings = Field(default_factory=PostgresSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    kafka: KafkaSettings = Field(default_factory=KafkaSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        yaml_file = os.getenv(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file),
            file_secret_settings,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
