"""SQLAlchemy models for RentalOps.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from rentalops.models.booking import Booking
from rentalops.models.cleaner import Cleaner
from rentalops.models.email_template import EmailTemplate, TemplateType
from rentalops.models.guest import Guest
from rentalops.models.guest_stay import GuestStay
from rentalops.models.property import Property
from rentalops.models.property_cleaner import PropertyCleaner
from rentalops.models.property_contact import ContactType, PropertyContact
from rentalops.models.property_lock_pin import PropertyLockPin
from rentalops.models.property_settings import PropertySettings
from rentalops.models.review import Review, ReviewPlatform
from rentalops.models.user import User, UserRole

__all__ = [
    "Booking",
    "Cleaner",
    "ContactType",
    "EmailTemplate",
    "Guest",
    "GuestStay",
    "Property",
    "PropertyCleaner",
    "PropertyContact",
    "PropertyLockPin",
    "PropertySettings",
    "Review",
    "ReviewPlatform",
    "TemplateType",
    "User",
    "UserRole",
]
