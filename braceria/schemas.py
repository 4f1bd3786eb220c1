from datetime import date, time
from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from .errors import ValidationError


REQUIRED_FIELDS = (
    "first_name",
    "last_name",
    "phone_number",
    "reservation_date",
    "reservation_time",
    "email",
)

def _present(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True

class ReservationRequest(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone_number: str = Field(..., min_length=1, max_length=32)
    email: EmailStr
    guests: int = Field(1, ge=1)
    reservation_date: date
    reservation_time: time
    cookie_consent: bool
    profiling_consent: bool = False
    promotional_sms_consent: bool = False
    accept_all: bool = False

    @field_validator("first_name", "last_name", "phone_number", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("guests", mode="before")
    @classmethod
    def default_guests(cls, v):
        return v or 1

    @field_validator("profiling_consent", "promotional_sms_consent", "accept_all", mode="before")
    @classmethod
    def optional_flag(cls, v):
        return False if v is None else v

    @classmethod
    def from_payload(cls, payload: dict) -> "ReservationRequest":
        """
        Validates a booking body in a fixed order, first failure wins:
        cookie consent, then required fields, then field formats.
        """
        if payload.get("cookie_consent") is not True:
            raise ValidationError("Cookie consent is required.", code="CONSENT_REQUIRED")

        missing = [name for name in REQUIRED_FIELDS if not _present(payload.get(name))]
        if missing:
            raise ValidationError("Missing required fields.", code="MISSING_FIELDS", details=missing)

        try:
            return cls.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(
                "Invalid input.",
                code="INVALID_FIELDS",
                details=e.errors(include_url=False, include_context=False),
            ) from e
