"""Pydantic schemas for API request/response validation."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# === Log Entry Schemas ===
class LogEntryCreate(BaseModel):
    """Body of POST /logs.

    ``action`` and ``description`` are optional here so that a missing value
    is rejected by the ingestor with a 400 rather than a 422.
    """
    action: Optional[str] = None
    description: Optional[str] = None
    user_id: Optional[int] = None
    user_email: Optional[str] = None
    product_code: Optional[str] = None
    product_name: Optional[str] = None
    ip_address: Optional[str] = None


class LogEntryResponse(BaseModel):
    id: int
    action: str
    description: str
    user_id: Optional[int] = None
    user_email: Optional[str] = None
    product_code: Optional[str] = None
    product_name: Optional[str] = None
    created_at: datetime
    ip_address: Optional[str] = None

    class Config:
        from_attributes = True


# === Pagination Schemas ===
class PaginationResponse(BaseModel):
    current_page: int = Field(alias="currentPage")
    total_pages: int = Field(alias="totalPages")
    total_items: int = Field(alias="totalItems")
    items_per_page: int = Field(alias="itemsPerPage")

    model_config = {"populate_by_name": True}


class LogListResponse(BaseModel):
    logs: List[LogEntryResponse]
    pagination: PaginationResponse


class DeleteResponse(BaseModel):
    success: bool = True
    message: str = "Log entry deleted!"


class HealthResponse(BaseModel):
    status: str
    db: str
