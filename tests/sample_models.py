# ABOUTME: Config model shapes shared by the test suite and CLI tests
# ABOUTME: Covers stdlib dataclasses, pydantic models, aliases, and frozen variants
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.dataclasses import dataclass as pydantic_dataclass


@dataclass
class ConfigModel:
    name: str = ""
    version: int = 0


class ServiceSettings(BaseModel):
    host: str = "localhost"
    port: int = 8080
    debug: bool = False
    timeout: timedelta = timedelta(seconds=30)
    tags: list[str] = Field(default_factory=list)


class AliasedSettings(BaseModel):
    api_key: str = Field("", alias="apiKey")
    retries: int = 3


@pydantic_dataclass
class DatabaseSection:
    dsn: str = "sqlite://"
    pool_size: int = 5


@dataclass(frozen=True)
class FrozenModel:
    name: str = ""


class FrozenSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""


@dataclass
class UnserializableModel:
    handle: Any = field(default_factory=object)


class PlainObject:
    def __init__(self):
        self.name = ""


@dataclass
class NestedConfig:
    label: str = ""
    inner: ConfigModel = field(default_factory=ConfigModel)


class AppSettings(BaseModel):
    name: str = "app"
    database: DatabaseSection = Field(default_factory=DatabaseSection)
    service: ServiceSettings = Field(default_factory=ServiceSettings)
