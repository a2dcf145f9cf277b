from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, SecretStr, field_validator

BASE_URL = "https://api1.tabdeal.org"
VERSION = "v1"


class ProxySettings(BaseModel):
    enabled: bool = False
    url: str | None = None
    username: str | None = None
    password: SecretStr | None = None

    model_config = {"extra": "forbid"}


class Credentials(BaseModel):
    api_key: SecretStr
    api_secret: SecretStr

    model_config = {"extra": "forbid"}


class Settings(BaseModel):
    env: str = "dev"
    base_url: str = BASE_URL
    version: str = VERSION
    timeout: float = Field(default=10.0, gt=0)
    credentials: Credentials | None = None
    proxy: ProxySettings = Field(default_factory=ProxySettings)

    model_config = {"extra": "forbid"}

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    def redacted(self) -> dict[str, Any]:
        data = self.model_dump(mode="json")
        creds = data.get("credentials")
        if isinstance(creds, dict):
            if "api_key" in creds:
                creds["api_key"] = "***"
            if "api_secret" in creds:
                creds["api_secret"] = "***"
        proxy = data.get("proxy")
        if isinstance(proxy, dict) and proxy.get("password") is not None:
            proxy["password"] = "***"
        return data
