from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional
from enum import Enum


class SearchHit(BaseModel):
    title: str
    href: str
    image: str = ""


class DetailRecord(BaseModel):
    title: str = ""
    description: str = ""
    image: str = ""
    airdate: str = ""
    aliases: str = ""


class Episode(BaseModel):
    href: str
    number: str


class StreamSource(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    is_m3u8: bool = Field(default=False, alias="isM3U8")
    quality: str = "auto"


class LookupStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    ERROR = "error"


class Lookup(BaseModel):
    """Outcome of one façade call: the value plus whether it came back empty or failed."""

    status: LookupStatus
    value: Any = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, value: Any) -> "Lookup":
        status = LookupStatus.OK if value else LookupStatus.EMPTY
        return cls(status=status, value=value)

    @classmethod
    def failed(cls, exc: Exception, default: Any = None) -> "Lookup":
        return cls(status=LookupStatus.ERROR, value=default, error=str(exc))

    @property
    def is_error(self) -> bool:
        return self.status == LookupStatus.ERROR
