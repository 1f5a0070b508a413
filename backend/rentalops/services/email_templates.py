"""Email template service — placeholder rendering and pre-/post-stay email preparation.

Templates use ``{variable}`` placeholders. The variables a template can use
are listed in ``EmailTemplate.available_variables`` (grouped by guest,
booking, property, pin and owner); property settings add the guest-info
variables (``wifi_network`` and friends). Sending is left to the mail
transport; this module only decides *what* to send and records that it was
sent.
"""

import html
import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentalops.models.booking import Booking
from rentalops.models.email_template import EmailTemplate, TemplateType
from rentalops.models.property import Property
from rentalops.models.property_settings import PropertySettings
from rentalops.models.user import User
from rentalops.services import lock_pins
from rentalops.services.errors import NotFoundError

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"\{([a-z_]+)\}")

# Shown when the property has not filled in the corresponding setting.
SETTINGS_FALLBACKS = {
    "wifi_network": "Not provided",
    "wifi_password": "Not provided",
    "check_in_instructions": "Standard check-in time is 3:00 PM",
    "parking_instructions": "Parking available on premises",
    "house_rules": "Please respect the property and neighbors",
}

DEFAULT_PRE_STAY_SUBJECT = "Welcome to {property_name} - Check-in Information"
DEFAULT_PRE_STAY_HTML = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1>Welcome to {property_name}!</h1>
  <p>Hi {guest_name},</p>
  <p>We're excited to host you! Here's your check-in information for your upcoming stay:</p>
  <h2>Booking Details</h2>
  <p><strong>Booking ID:</strong> {booking_id}</p>
  <p><strong>Check-in:</strong> {check_in_date}</p>
  <p><strong>Check-out:</strong> {check_out_date}</p>
  <p><strong>Nights:</strong> {nights}</p>
  <p><strong>Guests:</strong> {number_of_guests}</p>
  <h2>Property Information</h2>
  <p>{property_address}<br>{property_city}, {property_state} {property_zip}</p>
  <h2>Lock PIN Code</h2>
  <p style="font-size: 24px; font-weight: bold;">{lock_pin}</p>
  <p style="font-size: 12px;">Please keep this PIN secure and do not share it.</p>
  <h2>WiFi Information</h2>
  <p><strong>Network:</strong> {wifi_network}</p>
  <p><strong>Password:</strong> {wifi_password}</p>
  <h2>Check-in Instructions</h2>
  <p>{check_in_instructions}</p>
  <h3>Parking</h3>
  <p>{parking_instructions}</p>
  <h2>House Rules</h2>
  <p>{house_rules}</p>
  <p>Enjoy your stay!<br>{owner_name}<br>{owner_email}</p>
</div>
"""


class SkipReason(str, Enum):
    DISABLED = "disabled"
    ALREADY_SENT = "already_sent"


@dataclass
class PreparedEmail:
    """A rendered email ready for the mail transport."""

    booking_id: uuid.UUID
    to: str
    subject: str
    html: str
    text: str | None = None
    lock_pin: str | None = None
    template_id: uuid.UUID | None = None


@dataclass
class PrepareOutcome:
    email: PreparedEmail | None = None
    skipped: SkipReason | None = None
    context: dict[str, str] = field(default_factory=dict)


def render_template(text: str, context: dict[str, str], *, escape: bool = False) -> str:
    """Substitute ``{name}`` placeholders; unknown names are left as written."""

    def _sub(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in context:
            return match.group(0)
        value = context[name]
        return html.escape(value) if escape else value

    return PLACEHOLDER.sub(_sub, text)


def _fmt(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def build_context(
    booking: Booking,
    prop: Property,
    owner: User | None,
    prop_settings: PropertySettings | None,
    lock_pin: str | None = None,
) -> dict[str, str]:
    """Flat variable map for rendering a template against one booking."""
    context = {
        "guest_name": _fmt(booking.guest_name),
        "guest_email": _fmt(booking.guest_email),
        "guest_phone": _fmt(booking.guest_phone),
        "booking_id": _fmt(booking.id),
        "check_in_date": _fmt(booking.check_in),
        "check_out_date": _fmt(booking.check_out),
        "nights": _fmt(booking.nights),
        "number_of_guests": _fmt(booking.number_of_guests),
        "total_amount": _fmt(booking.total_amount),
        "property_name": _fmt(prop.name),
        "property_address": _fmt(prop.address),
        "property_city": _fmt(prop.city),
        "property_state": _fmt(prop.state),
        "property_zip": _fmt(prop.zip_code),
        "lock_pin": lock_pin or booking.assigned_lock_pin or "N/A",
        "owner_name": owner.name if owner is not None and owner.name else "Property Owner",
        "owner_phone": _fmt(owner.phone_number) if owner is not None else "",
        "owner_email": _fmt(owner.email) if owner is not None else "",
    }
    for name, fallback in SETTINGS_FALLBACKS.items():
        value = getattr(prop_settings, name, None) if prop_settings is not None else None
        context[name] = value or fallback
    return context


async def templates_for_property(
    db: AsyncSession,
    property_id: uuid.UUID,
    template_type: TemplateType | None = None,
    *,
    active_only: bool = False,
) -> list[EmailTemplate]:
    query = select(EmailTemplate).where(EmailTemplate.property_id == property_id)
    if template_type is not None:
        query = query.where(EmailTemplate.template_type == template_type)
    if active_only:
        query = query.where(EmailTemplate.is_active.is_(True))
    result = await db.execute(query.order_by(EmailTemplate.created_at))
    return list(result.scalars().all())


async def get_template(db: AsyncSession, property_id: uuid.UUID, template_id: uuid.UUID) -> EmailTemplate:
    result = await db.execute(
        select(EmailTemplate).where(
            EmailTemplate.id == template_id,
            EmailTemplate.property_id == property_id,
        )
    )
    template = result.scalar_one_or_none()
    if template is None:
        raise NotFoundError("Email template not found")
    return template


async def _load_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    booking = await db.get(Booking, booking_id)
    if booking is None:
        raise NotFoundError(f"Booking {booking_id} not found")
    return booking


async def _settings_for(db: AsyncSession, property_id: uuid.UUID) -> PropertySettings | None:
    result = await db.execute(select(PropertySettings).where(PropertySettings.property_id == property_id))
    return result.scalar_one_or_none()


async def prepare_pre_stay_email(db: AsyncSession, booking_id: uuid.UUID) -> PrepareOutcome:
    """Render the pre-stay email for a booking, assigning a rotating PIN if needed.

    The booking is not marked as sent here; call :func:`mark_pre_stay_sent`
    once the transport has accepted the message.
    """
    booking = await _load_booking(db, booking_id)
    prop = await db.get(Property, booking.property_id)
    prop_settings = await _settings_for(db, prop.id)

    if prop_settings is None or not prop_settings.pre_stay_email_enabled:
        logger.info("Pre-stay emails not enabled for property %s", prop.id)
        return PrepareOutcome(skipped=SkipReason.DISABLED)
    if booking.pre_stay_email_sent_at is not None:
        logger.info("Pre-stay email already sent for booking %s", booking.id)
        return PrepareOutcome(skipped=SkipReason.ALREADY_SENT)

    pin = booking.assigned_lock_pin
    if prop_settings.rotating_pins_enabled and not pin:
        pin = await lock_pins.assign_pin_to_booking(db, booking)

    templates = await templates_for_property(db, prop.id, TemplateType.PRE_STAY, active_only=True)
    template = templates[0] if templates else None

    owner = await db.get(User, prop.user_id)
    context = build_context(booking, prop, owner, prop_settings, lock_pin=pin)

    if template is None:
        subject, body, text = DEFAULT_PRE_STAY_SUBJECT, DEFAULT_PRE_STAY_HTML, None
    else:
        subject, body, text = template.subject, template.html_content, template.plain_text_content

    email = PreparedEmail(
        booking_id=booking.id,
        to=booking.guest_email,
        subject=render_template(subject, context),
        html=render_template(body, context, escape=True),
        text=render_template(text, context) if text else None,
        lock_pin=pin,
        template_id=template.id if template is not None else None,
    )
    return PrepareOutcome(email=email, context=context)


async def due_pre_stay_bookings(db: AsyncSession, today: date | None = None) -> list[Booking]:
    """Confirmed bookings inside their property's pre-stay window that have not been emailed."""
    today = today or datetime.now(timezone.utc).date()
    result = await db.execute(
        select(Booking, PropertySettings.pre_stay_email_days)
        .join(PropertySettings, PropertySettings.property_id == Booking.property_id)
        .where(
            PropertySettings.pre_stay_email_enabled.is_(True),
            Booking.status == "confirmed",
            Booking.pre_stay_email_sent_at.is_(None),
            Booking.check_in >= today,
        )
        .order_by(Booking.check_in)
    )
    return [
        booking
        for booking, window in result.all()
        if booking.check_in <= today + timedelta(days=window)
    ]


async def mark_pre_stay_sent(db: AsyncSession, booking: Booking) -> None:
    booking.pre_stay_email_sent_at = datetime.now(timezone.utc)
    await db.flush()


async def mark_post_stay_sent(db: AsyncSession, booking: Booking) -> None:
    booking.post_stay_email_sent_at = datetime.now(timezone.utc)
    await db.flush()
