"""
Ticket Models - Data classes for extracted ticket fields and scan results
"""
from dataclasses import dataclass, field, fields as dataclass_fields, replace
from enum import Enum
from typing import Optional, Dict, Any, List, Mapping

from dateutil import parser as date_parser


# Wire-shape keys (camelCase) mapped to python attribute names
FIELD_KEYS = {
    'movieTitle': 'movie_title',
    'showTime': 'show_time',
    'showDate': 'show_date',
    'price': 'price',
    'seatNumber': 'seat_number',
    'movieRating': 'movie_rating',
    'theaterRoom': 'theater_room',
    'ticketNumber': 'ticket_number',
    'theaterName': 'theater_name',
    'theaterChain': 'theater_chain',
    'ticketType': 'ticket_type',
}

UNKNOWN_TITLES = ('Unknown', 'Unknown Movie')
MIN_SUPPORTING_FIELDS = 3

_NULL_MARKERS = {'', 'null', 'none', 'n/a'}


def _clean_value(value: Any) -> Optional[str]:
    """Coerce a loosely typed payload value into a string or None."""
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    if value.lower() in _NULL_MARKERS:
        return None
    return value


@dataclass
class TicketFields:
    """The eleven canonical ticket attributes. None means not found on the ticket."""
    movie_title: Optional[str] = None
    show_time: Optional[str] = None
    show_date: Optional[str] = None
    price: Optional[str] = None
    seat_number: Optional[str] = None
    movie_rating: Optional[str] = None
    theater_room: Optional[str] = None
    ticket_number: Optional[str] = None
    theater_name: Optional[str] = None
    theater_chain: Optional[str] = None
    ticket_type: Optional[str] = None

    @classmethod
    def empty(cls) -> 'TicketFields':
        """All-null scaffold."""
        return cls()

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'TicketFields':
        """
        Intersect an untyped payload with the all-null template.

        Accepts camelCase wire keys or snake_case attribute names. Unknown keys
        are dropped, missing keys stay None.
        """
        values = {}
        if data:
            attribute_names = set(FIELD_KEYS.values())
            for key, raw_value in data.items():
                attribute = FIELD_KEYS.get(key) or (key if key in attribute_names else None)
                if attribute:
                    values[attribute] = _clean_value(raw_value)
        return cls(**values)

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Wire shape with the fixed camelCase keys."""
        return {key: getattr(self, attribute) for key, attribute in FIELD_KEYS.items()}

    def with_changes(self, **changes) -> 'TicketFields':
        return replace(self, **changes)

    def supporting_fields(self) -> List[str]:
        """Names of populated fields other than the movie title."""
        return [
            f.name for f in dataclass_fields(self)
            if f.name != 'movie_title' and getattr(self, f.name)
        ]

    def has_usable_title(self) -> bool:
        return bool(self.movie_title) and self.movie_title not in UNKNOWN_TITLES


def validate_ticket_fields(ticket_fields: TicketFields) -> bool:
    """
    Business rule shared by the vision and OCR paths: a usable title plus at
    least three of the ten other fields.
    """
    if not ticket_fields.has_usable_title():
        return False
    return len(ticket_fields.supporting_fields()) >= MIN_SUPPORTING_FIELDS


@dataclass
class ExtractionResult:
    """Result of one provider extraction call."""
    success: bool
    fields: TicketFields = field(default_factory=TicketFields.empty)
    raw_response: Any = None
    error: Optional[str] = None
    provider_name: Optional[str] = None
    attempts: int = 0

    def __post_init__(self):
        # Failed results never carry partially populated fields
        if not self.success:
            self.fields = TicketFields.empty()

    @classmethod
    def ok(cls, fields: TicketFields, raw_response: Any = None,
           provider_name: Optional[str] = None, attempts: int = 1) -> 'ExtractionResult':
        return cls(success=True, fields=fields, raw_response=raw_response,
                   provider_name=provider_name, attempts=attempts)

    @classmethod
    def failure(cls, error: str, raw_response: Any = None,
                provider_name: Optional[str] = None, attempts: int = 0) -> 'ExtractionResult':
        return cls(success=False, error=error, raw_response=raw_response,
                   provider_name=provider_name, attempts=attempts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'data': self.fields.to_dict(),
            'rawResponse': self.raw_response,
            'error': self.error,
            'provider': self.provider_name,
            'attempts': self.attempts,
        }


@dataclass(frozen=True)
class ProviderDescriptor:
    """A configured vision backend. Built once from configuration."""
    name: str
    api_key: str
    model_version: Optional[str] = None
    timeout: float = 30.0
    max_retries: int = 3
    endpoint: Optional[str] = None
    deployment_name: Optional[str] = None


@dataclass
class CatalogCandidate:
    """A movie returned by the catalog search."""
    title: str
    release_date: Optional[str] = None
    popularity: float = 0.0
    catalog_id: Optional[int] = None

    @classmethod
    def from_api(cls, item: Mapping[str, Any]) -> 'CatalogCandidate':
        return cls(
            title=item.get('title') or item.get('original_title') or '',
            release_date=item.get('release_date') or None,
            popularity=float(item.get('popularity') or 0.0),
            catalog_id=item.get('id'),
        )

    @property
    def release_year(self) -> Optional[int]:
        if not self.release_date:
            return None
        try:
            return date_parser.parse(self.release_date).year
        except (ValueError, OverflowError, TypeError):
            return None


class ScanStatus(Enum):
    """Outcome of a scan request."""
    SUCCESS = "success"
    INCOMPLETE = "incomplete"  # extracted, but too sparse to trust
    FAILED = "failed"


@dataclass
class ScanOutcome:
    """Persisted-shape record of one scan. The caller decides whether to store it."""
    user_id: Any
    image_path: str
    fields: TicketFields
    raw_response: Any = None
    provider_name: Optional[str] = None
    status: ScanStatus = ScanStatus.SUCCESS
    message: Optional[str] = None
    original_title: Optional[str] = None
    source: str = "vision"

    @property
    def is_valid(self) -> bool:
        return self.status == ScanStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        record = {
            'userId': self.user_id,
            'ticketImagePath': self.image_path,
            'rawVisionResponse': self.raw_response,
            'provider': self.provider_name,
            'status': self.status.value,
            'message': self.message,
            'originalTitle': self.original_title,
            'source': self.source,
        }
        record.update(self.fields.to_dict())
        return record
