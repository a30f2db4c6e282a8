"""Audit log API endpoints: list with filters, record, delete."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from slowapi import Limiter
from sqlalchemy.orm import Session

from auditlog.audit import clean_text, record_action
from auditlog.database import LogStore, get_db, get_store
from auditlog.errors import InvalidInput, NotFound, StoreUnavailable
from auditlog.schemas import (
    DeleteResponse, LogEntryCreate, LogEntryResponse, LogListResponse, PaginationResponse,
)
from auditlog.services import (
    LogFilters, build_predicate, query_logs, query_logs_snapshot, remove_entry,
)

logger = logging.getLogger("auditlog.api")


def list_logs(
    request: Request,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    action: Optional[str] = None,
    user: Optional[str] = None,
    product: Optional[str] = None,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    consistent: bool = False,
    db: Session = Depends(get_db),
    store: LogStore = Depends(get_store),
):
    """List log entries, newest first, with optional filters.

    ``consistent=true`` computes the page and the total inside one snapshot
    transaction instead of two independent reads.
    """
    settings = request.app.state.settings
    limit = min(limit or settings.default_page_size, settings.max_page_size)

    try:
        filters = LogFilters.from_params(action, user, product, start_date, end_date)
        predicate = build_predicate(filters)
        if consistent:
            result = query_logs_snapshot(store, predicate, page, limit)
        else:
            result = query_logs(db, predicate, page, limit)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreUnavailable:
        logger.exception("list_logs failed")
        raise HTTPException(status_code=500, detail="Failed to fetch logs")

    return LogListResponse(
        logs=[LogEntryResponse.model_validate(entry) for entry in result.items],
        pagination=PaginationResponse(
            current_page=result.current_page,
            total_pages=result.total_pages,
            total_items=result.total_items,
            items_per_page=result.items_per_page,
        ),
    )


def create_log(
    request: Request,
    payload: LogEntryCreate,
    db: Session = Depends(get_db),
):
    """Record a new log entry."""
    try:
        entry = record_action(db, **payload.model_dump())
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreUnavailable:
        logger.exception("create_log failed")
        raise HTTPException(status_code=500, detail="Failed to create log entry")
    return entry


def _parse_entry_id(raw: Optional[str]) -> Optional[int]:
    raw = clean_text(raw)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        raise InvalidInput("Log ID must be an integer")


def delete_log(
    entry_id: Optional[str] = Query(None, alias="id"),
    db: Session = Depends(get_db),
):
    """Delete a single log entry by id. A blank ``id`` counts as missing."""
    try:
        remove_entry(db, _parse_entry_id(entry_id))
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFound:
        raise HTTPException(status_code=404, detail="Log entry not found")
    except StoreUnavailable:
        logger.exception("delete_log failed")
        raise HTTPException(status_code=500, detail="Failed to delete log entry")
    return DeleteResponse()


def create_router(limiter: Limiter, ingest_rate_limit: str) -> APIRouter:
    """Build the /logs routes with POST limited per client by ``limiter``."""
    router = APIRouter(prefix="/logs", tags=["logs"])
    router.add_api_route("", list_logs, methods=["GET"], response_model=LogListResponse)
    router.add_api_route(
        "",
        limiter.limit(ingest_rate_limit)(create_log),
        methods=["POST"],
        response_model=LogEntryResponse,
        status_code=201,
    )
    router.add_api_route("", delete_log, methods=["DELETE"], response_model=DeleteResponse)
    return router
