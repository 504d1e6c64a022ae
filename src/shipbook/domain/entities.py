"""Domain entities: BookingRecord (input) and Contact (derived)."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from shipbook.domain.errors import InvalidRecordError

# Booking service payload key -> BookingRecord attribute. Snake-case keys map to themselves.
_FIELD_ALIASES = {
    "senderName": "sender_name",
    "senderPhone": "sender_phone",
    "senderEmail": "sender_email",
    "senderGST": "sender_gst_number",
    "senderGstNumber": "sender_gst_number",
    "receiverName": "receiver_name",
    "receiverPhone": "receiver_phone",
    "receiverEmail": "receiver_email",
    "receiverGST": "receiver_gst_number",
    "receiverGstNumber": "receiver_gst_number",
    "pickupCity": "pickup_city",
    "pickupAddress": "pickup_address",
    "deliveryCity": "delivery_city",
    "deliveryAddress": "delivery_address",
    "totalAmount": "total_amount",
    "createdAt": "created_at",
}

_TEXT_FIELDS = (
    "sender_name",
    "sender_phone",
    "sender_email",
    "sender_gst_number",
    "receiver_name",
    "receiver_phone",
    "receiver_email",
    "receiver_gst_number",
    "pickup_city",
    "pickup_address",
    "delivery_city",
    "delivery_address",
)


def parse_amount(value: Any) -> Decimal | None:
    """Return the amount as a finite Decimal, or None when absent or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return amount if amount.is_finite() else None


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 string or datetime into an aware datetime (naive values are UTC)."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidRecordError(f"Invalid createdAt timestamp: {value!r}") from exc
    else:
        raise InvalidRecordError("Booking record requires createdAt.")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class BookingRecord:
    """
    One logistics booking as delivered by the booking service.
    Fields the core does not interpret are kept in extra_fields (trackingNumber, status, ...).
    """

    created_at: datetime
    sender_name: str | None = None
    sender_phone: str | None = None
    sender_email: str | None = None
    sender_gst_number: str | None = None
    receiver_name: str | None = None
    receiver_phone: str | None = None
    receiver_email: str | None = None
    receiver_gst_number: str | None = None
    pickup_city: str | None = None
    pickup_address: str | None = None
    delivery_city: str | None = None
    delivery_address: str | None = None
    total_amount: Decimal | None = None
    extra_fields: dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if not isinstance(self.created_at, datetime):
            raise InvalidRecordError("Booking record requires createdAt.")

    @property
    def amount(self) -> Decimal:
        """total_amount with absent treated as zero."""
        return self.total_amount if self.total_amount is not None else Decimal(0)

    def get_field(self, name: str, default: Any = None) -> Any:
        """Return a core attribute or a pass-through field by its payload name."""
        attr = _FIELD_ALIASES.get(name, name)
        if attr != "extra_fields" and attr in self.__dataclass_fields__:
            return getattr(self, attr)
        return self.extra_fields.get(name, default)

    @classmethod
    def from_dict(cls, data: Any) -> "BookingRecord":
        """Validate a booking payload (camelCase or snake_case keys) into a BookingRecord.

        Raises InvalidRecordError when the payload is not a mapping or createdAt
        is missing or unparseable. Non-numeric amounts become None.
        """
        if not isinstance(data, dict):
            raise InvalidRecordError(
                f"Booking record must be an object, got {type(data).__name__}."
            )
        core: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in data.items():
            attr = _FIELD_ALIASES.get(key, key)
            if attr in _TEXT_FIELDS or attr in ("total_amount", "created_at"):
                core[attr] = value
            else:
                extra[key] = value

        kwargs: dict[str, Any] = {name: _optional_text(core.get(name)) for name in _TEXT_FIELDS}
        kwargs["total_amount"] = parse_amount(core.get("total_amount"))
        kwargs["created_at"] = parse_timestamp(core.get("created_at"))
        return cls(**kwargs, extra_fields=extra)

    def to_dict(self) -> dict[str, Any]:
        """Payload view with camelCase keys and pass-through fields flattened back in."""
        out: dict[str, Any] = dict(self.extra_fields)
        out.update(
            senderName=self.sender_name,
            senderPhone=self.sender_phone,
            senderEmail=self.sender_email,
            senderGST=self.sender_gst_number,
            receiverName=self.receiver_name,
            receiverPhone=self.receiver_phone,
            receiverEmail=self.receiver_email,
            receiverGST=self.receiver_gst_number,
            pickupCity=self.pickup_city,
            pickupAddress=self.pickup_address,
            deliveryCity=self.delivery_city,
            deliveryAddress=self.delivery_address,
            totalAmount=float(self.total_amount) if self.total_amount is not None else None,
            createdAt=self.created_at.isoformat(),
        )
        return out


class ContactRole(str, Enum):
    SENDER = "sender"
    RECEIVER = "receiver"


def contact_key(name: str, phone: str | None) -> str:
    """Display form of the grouping key: exact name and phone, no normalization."""
    return f"{name}|{phone or ''}"


@dataclass(frozen=True)
class Contact:
    """
    A sender or receiver derived from one or more bookings sharing name and phone.
    Built once per aggregation run and never changed afterwards.
    """

    name: str
    phone: str
    role: ContactRole
    booking_count: int
    total_amount: Decimal
    last_booking_at: datetime
    bookings: tuple[BookingRecord, ...] = ()
    email: str | None = None
    gst_number: str | None = None
    primary_city: str | None = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Contact name must be non-empty.")
        if self.booking_count < 1:
            raise ValueError("Contact must have at least one booking.")

    @property
    def key(self) -> str:
        return contact_key(self.name, self.phone)

    @property
    def average_per_booking(self) -> Decimal:
        return self.total_amount / self.booking_count
