"""
Customer Details Value Object

Validated contact details for a booking. Validation is local: it never
needs the Remote Booking Service and never consumes a submission attempt.
"""

import re

import attrs

from src.platform.config.core_setting import settings
from src.service.storefront.domain.domain_errors import CustomerDetailsValidationError


EMAIL_PATTERN = re.compile(r'^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$')


@attrs.define(frozen=True)
class CustomerDetails:
    name: str
    phone: str
    email: str

    @classmethod
    def create(
        cls, *, name: str, phone: str, email: str, min_phone_digits: int = settings.MIN_PHONE_DIGITS
    ) -> 'CustomerDetails':
        name, phone, email = name.strip(), phone.strip(), email.strip()
        field_errors: dict[str, str] = {}

        if not name:
            field_errors['name'] = 'Full name is required'
        if len(re.sub(r'\D', '', phone)) < min_phone_digits:
            field_errors['phone'] = f'Phone number must have at least {min_phone_digits} digits'
        if not EMAIL_PATTERN.match(email):
            field_errors['email'] = 'Enter a valid email address'

        if field_errors:
            raise CustomerDetailsValidationError(field_errors)
        return cls(name=name, phone=phone, email=email)
