"""
FastAPI backend: sender/receiver contact directories derived from bookings.
Run with uvicorn: uvicorn api.main:app --reload
"""

import logging
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load .env from repo root (when run from repo root or from Docker)
for path in (
    Path(__file__).resolve().parent.parent.parent / ".env",
    Path.cwd() / ".env",
):
    if path.exists():
        load_dotenv(path)
        break

from contextlib import asynccontextmanager

from fastapi import Body, FastAPI, HTTPException, Query, Request
from pydantic import BaseModel

from shipbook.application import (
    BookingSummary,
    ContactService,
    DirectoryStats,
    aggregate,
    booking_summary,
)
from shipbook.domain import (
    BookingRecord,
    BookingSourceError,
    Contact,
    ContactRole,
    InvalidRecordError,
)
from shipbook.infrastructure import (
    HttpBookingSource,
    Settings,
    load_settings,
    phone_normalizer,
)

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

_ROLES = {"senders": ContactRole.SENDER, "receivers": ContactRole.RECEIVER}


def build_service(settings: Settings) -> ContactService | None:
    """ContactService over the HTTP booking source, or None when BOOKINGS_URL is unset."""
    if not settings.bookings_url:
        return None
    source = HttpBookingSource(
        settings.bookings_url,
        token=settings.bookings_token,
        cookie=settings.bookings_cookie,
        timeout=settings.bookings_timeout,
    )
    return ContactService(source, normalize_phone=phone_normalizer(settings.default_phone_region))


def get_service(app: FastAPI) -> ContactService:
    service = getattr(app.state, "service", None)
    if service is None:
        service = build_service(load_settings())
        if service is None:
            raise HTTPException(status_code=503, detail="BOOKINGS_URL is not configured")
        app.state.service = service
    return service


def _role(role: str) -> ContactRole:
    try:
        return _ROLES[role]
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown directory: {role}") from None


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = load_settings()
    app.state.service = build_service(settings)
    if app.state.service is None:
        logger.warning("BOOKINGS_URL not set; only POST /contacts/aggregate is available.")
    else:
        logger.info("Reading bookings from %s", settings.bookings_url)
    yield


app = FastAPI(title="Shipbook Contacts API", lifespan=lifespan)


# --- response models ---


class BookingItem(BaseModel):
    created_at: str
    total_amount: float | None = None
    pickup_city: str | None = None
    delivery_city: str | None = None
    fields: dict[str, Any] = {}


class ContactItem(BaseModel):
    key: str
    name: str
    phone: str
    role: str
    email: str | None = None
    gst_number: str | None = None
    primary_city: str | None = None
    booking_count: int
    total_amount: float
    average_per_booking: float
    last_booking_at: str


class ContactDetailItem(ContactItem):
    recent_bookings: list[BookingItem]


class StatsItem(BaseModel):
    total_contacts: int
    total_revenue: float
    average_revenue_per_contact: float


class SummaryItem(BaseModel):
    total_senders: int
    total_receivers: int
    total_bookings: int
    total_revenue: float


class DirectoryResponse(BaseModel):
    contacts: list[ContactItem]
    showing: int
    stats: StatsItem


class AggregateResponse(BaseModel):
    senders: list[ContactItem]
    receivers: list[ContactItem]
    summary: SummaryItem


class DuplicateGroupItem(BaseModel):
    normalized_phone: str
    contacts: list[ContactItem]


def _booking_item(b: BookingRecord) -> BookingItem:
    return BookingItem(
        created_at=b.created_at.isoformat(),
        total_amount=float(b.total_amount) if b.total_amount is not None else None,
        pickup_city=b.pickup_city,
        delivery_city=b.delivery_city,
        fields=dict(b.extra_fields),
    )


def _contact_item(c: Contact) -> ContactItem:
    return ContactItem(
        key=c.key,
        name=c.name,
        phone=c.phone,
        role=c.role.value,
        email=c.email,
        gst_number=c.gst_number,
        primary_city=c.primary_city,
        booking_count=c.booking_count,
        total_amount=float(c.total_amount),
        average_per_booking=float(c.average_per_booking),
        last_booking_at=c.last_booking_at.isoformat(),
    )


def _stats_item(s: DirectoryStats) -> StatsItem:
    return StatsItem(
        total_contacts=s.total_contacts,
        total_revenue=float(s.total_revenue),
        average_revenue_per_contact=float(s.average_revenue_per_contact),
    )


def _summary_item(s: BookingSummary) -> SummaryItem:
    return SummaryItem(
        total_senders=s.total_senders,
        total_receivers=s.total_receivers,
        total_bookings=s.total_bookings,
        total_revenue=float(s.total_revenue),
    )


# --- REST: health ---


@app.get("/health")
def health():
    return {"status": "ok"}


# --- REST: contacts ---


@app.post("/contacts/aggregate", response_model=AggregateResponse)
def aggregate_bookings(bookings: list[Any] = Body(...)):
    """Aggregate a booking list supplied in the request body. Nothing is stored."""
    try:
        records = [BookingRecord.from_dict(row) for row in bookings]
    except InvalidRecordError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    directories = aggregate(records)
    return AggregateResponse(
        senders=[_contact_item(c) for c in directories.senders],
        receivers=[_contact_item(c) for c in directories.receivers],
        summary=_summary_item(booking_summary(records, directories)),
    )


def _call(fn, *args, **kwargs):
    """Run a service call, mapping source and record errors to HTTP errors."""
    try:
        return fn(*args, **kwargs)
    except BookingSourceError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    except InvalidRecordError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@app.post("/contacts/refresh", response_model=SummaryItem)
def refresh_contacts(request: Request):
    service = get_service(request.app)
    _call(service.refresh)
    return _summary_item(service.summary())


@app.get("/contacts/summary", response_model=SummaryItem)
def contacts_summary(request: Request):
    service = get_service(request.app)
    return _summary_item(_call(service.summary))


@app.get("/contacts/{role}", response_model=DirectoryResponse)
def list_contacts(role: str, request: Request, q: str = ""):
    contact_role = _role(role)
    service = get_service(request.app)
    contacts = _call(service.list_contacts, contact_role, q)
    return DirectoryResponse(
        contacts=[_contact_item(c) for c in contacts],
        showing=len(contacts),
        stats=_stats_item(service.stats(contact_role)),
    )


@app.get("/contacts/{role}/detail", response_model=ContactDetailItem)
def contact_detail(
    role: str,
    request: Request,
    name: str,
    phone: str = "",
    limit: int = Query(5, ge=0),
):
    contact_role = _role(role)
    service = get_service(request.app)
    detail = _call(service.get_contact, contact_role, name, phone, limit=limit)
    if detail is None:
        raise HTTPException(status_code=404, detail="Contact not found")
    item = _contact_item(detail.contact)
    return ContactDetailItem(
        **item.model_dump(),
        recent_bookings=[_booking_item(b) for b in detail.recent_bookings],
    )


@app.get("/contacts/{role}/duplicates", response_model=list[DuplicateGroupItem])
def contact_duplicates(role: str, request: Request):
    contact_role = _role(role)
    service = get_service(request.app)
    groups = _call(service.possible_duplicates, contact_role)
    return [
        DuplicateGroupItem(
            normalized_phone=g.normalized_phone,
            contacts=[_contact_item(c) for c in g.contacts],
        )
        for g in groups
    ]
