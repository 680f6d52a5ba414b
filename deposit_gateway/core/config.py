"""Application configuration using pydantic settings with structured sections."""

from decimal import Decimal
from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 16726


class DatabaseSettings(BaseModel):
    url: str = "sqlite+aiosqlite:///./deposit_gateway.db"
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None


class PaymentSettings(BaseModel):
    recipient: str = ""
    master_seed: Optional[SecretStr] = None
    minimum_amount: Decimal = Field(default=Decimal("0.07"), gt=0)
    minimum_withdrawal: Decimal = Field(default=Decimal("0.01"), ge=0)
    currencies: list[str] = Field(default_factory=lambda: ["DOT"])


class ChainSettings(BaseModel):
    rpc: str = "wss://rpc.polkadot.io"
    decimals: int = Field(default=10, ge=0)
    timeout: float = Field(default=10.0, gt=0)


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "Deposit Gateway"
    api_prefix: str = ""

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    payment: PaymentSettings = PaymentSettings()
    chain: ChainSettings = ChainSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def chain_timeout(self) -> float:
        return self.chain.timeout


@lru_cache()
def get_settings() -> Settings:
    return Settings()
