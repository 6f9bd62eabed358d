"""Request and response models for the web API (camelCase on the wire)."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ncert_tutor.booking.conflicts import as_utc


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SummarizeRequest(CamelModel):
    pdf_path: str = Field(..., min_length=1)
    pages: list[int] = Field(..., min_length=1)
    summary_type: Literal["brief", "detailed", "key-points", "chat"] = "brief"
    # Only used when summary_type is "chat"
    chat_message: str | None = None
    previous_context: str | None = None
    original_summary: str | None = None
    subject: str | None = None
    chapter_title: str | None = None


class ChatRequest(CamelModel):
    pdf_path: str = Field(..., min_length=1)
    pages: list[int] = Field(..., min_length=1)
    chat_message: str = Field(..., min_length=1)
    previous_context: str | None = None
    original_summary: str | None = None
    subject: str | None = None
    chapter_title: str | None = None


class ExercisesRequest(CamelModel):
    summary: str = Field(..., min_length=1)
    pages: list[int] = Field(default_factory=list)
    subject: str = "general"


class PdfMetadataRequest(CamelModel):
    pdf_path: str = Field(..., min_length=1)


class BookingCreate(CamelModel):
    tutor_id: str = Field(..., min_length=1)
    start_time: str = Field(..., min_length=1)
    end_time: str = Field(..., min_length=1)
    timezone: str | None = None
    subject: str | None = None


class BookingResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    tutor_id: str
    student_id: str
    start_time: datetime
    end_time: datetime
    subject: str
    status: str
    created_at: datetime

    @field_validator("start_time", "end_time", "created_at")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return as_utc(value)
