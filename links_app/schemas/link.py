from datetime import datetime
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from links_app.models.link import SHORT_URL_MAX_LENGTH, URL_MAX_LENGTH

_HTTP_URL = TypeAdapter(HttpUrl)


class CamelModel(BaseModel):
    """JSON uses camelCase (shortUrl, accessCount...), Python uses snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LinkCreate(CamelModel):
    url: str = Field(..., description="The URL to be shortened")
    short_url: str = Field(
        ...,
        min_length=1,
        max_length=SHORT_URL_MAX_LENGTH,
        description="The alias for the shortened link",
    )

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str) -> str:
        """Validate as an http(s) URL but keep the string exactly as sent."""
        if len(value) > URL_MAX_LENGTH:
            raise ValueError(f"URL must be at most {URL_MAX_LENGTH} characters")
        try:
            _HTTP_URL.validate_python(value)
        except ValidationError as exc:
            raise ValueError(exc.errors()[0]["msg"]) from exc
        return value


class LinkResponse(CamelModel):
    """Serializes the SQLAlchemy Link model (from_attributes=True)."""

    id: str
    url: str
    short_url: str
    access_count: int
    created_at: datetime

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class LinkDelete(CamelModel):
    id: UUID = Field(..., description="UUIDv7 identifier of the link")

    @field_validator("id")
    @classmethod
    def check_uuid_version(cls, value: UUID) -> UUID:
        if value.version != 7:
            raise ValueError("id must be a UUIDv7")
        return value


class ExportResponse(CamelModel):
    report_url: str


class ErrorResponse(BaseModel):
    message: str
