# vegist/services/checkout_validation.py
"""
Checkout form rules.

Each rule returns "" when the value is valid, otherwise the message shown
under the field. The form is valid iff every rule for the active payment
method returns "".
"""
import re
from typing import Literal

PaymentMethod = Literal["esewa", "khalti", "cod"]

PAYMENT_METHODS: tuple[str, ...] = ("esewa", "khalti", "cod")

CITIES: dict[str, str] = {
    "bhairahawa": "Bhairahawa",
    "butwal": "Butwal",
}

CONTACT_FIELDS: tuple[str, ...] = ("email", "first_name", "last_name", "address", "city")

PAYMENT_FIELDS: dict[str, tuple[str, ...]] = {
    "esewa": ("esewa_id", "esewa_password"),
    "khalti": ("khalti_number", "khalti_mpin"),
    "cod": (),
}

ALL_PAYMENT_FIELDS: tuple[str, ...] = tuple(
    f for fields in PAYMENT_FIELDS.values() for f in fields
)

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
NAME_RE = re.compile(r"[a-zA-Z\s]*")
KHALTI_NUMBER_RE = re.compile(r"98[0-9]{8}")
MPIN_RE = re.compile(r"[0-9]{4}")


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.fullmatch(value or ""))


def _name_rule(label: str, value: str) -> str:
    if not value.strip():
        return f"{label} is required"
    if len(value.strip()) < 2:
        return f"{label} must be at least 2 characters"
    if not NAME_RE.fullmatch(value):
        return f"{label} can only contain letters and spaces"
    return ""


def validate_field(name: str, value: str | None, payment_method: str = "esewa") -> str:
    """
    Validate a single field.

    Payment fields only produce errors while their method is active.
    Unknown field names are always valid.
    """
    value = value or ""

    if name == "email":
        if not value.strip():
            return "Email is required"
        if not is_valid_email(value):
            return "Please enter a valid email address"
        return ""

    if name == "first_name":
        return _name_rule("First name", value)

    if name == "last_name":
        return _name_rule("Last name", value)

    if name == "address":
        if not value.strip():
            return "Address is required"
        if len(value.strip()) < 10:
            return "Please enter a complete address (at least 10 characters)"
        return ""

    if name == "city":
        if not value.strip():
            return "Please select a city"
        if value.strip().lower() not in CITIES:
            return "Please select a city from the list"
        return ""

    if name == "esewa_id":
        if payment_method != "esewa":
            return ""
        if not value.strip():
            return "eSewa ID is required"
        if len(value.strip()) < 5:
            return "Please enter a valid eSewa ID"
        return ""

    if name == "esewa_password":
        if payment_method == "esewa" and not value.strip():
            return "eSewa password is required"
        return ""

    if name == "khalti_number":
        if payment_method != "khalti":
            return ""
        if not value.strip():
            return "Khalti number is required"
        if not KHALTI_NUMBER_RE.fullmatch(re.sub(r"\s", "", value)):
            return "Please enter a valid Khalti number (98XXXXXXXX)"
        return ""

    if name == "khalti_mpin":
        if payment_method != "khalti":
            return ""
        if not value.strip():
            return "Khalti MPIN is required"
        if not MPIN_RE.fullmatch(value):
            return "MPIN must be 4 digits"
        return ""

    return ""


def form_fields(payment_method: str) -> tuple[str, ...]:
    return CONTACT_FIELDS + PAYMENT_FIELDS.get(payment_method, ())


def validate_form(values: dict[str, str | None], payment_method: str) -> dict[str, str]:
    """
    Run every rule for the active payment method.

    Returns:
        field -> message for every checked field ("" when valid).
    """
    return {
        name: validate_field(name, values.get(name), payment_method)
        for name in form_fields(payment_method)
    }


def is_form_valid(errors: dict[str, str]) -> bool:
    return not any(errors.values())


class CheckoutFormState:
    """
    Values, errors and touched flags of the checkout form.

    Errors are only visible for touched fields, so nothing shows before the
    customer has interacted with a field or tried to submit.
    """

    def __init__(self, payment_method: str = "esewa", **values: str):
        if payment_method not in PAYMENT_METHODS:
            raise ValueError(f"Unknown payment method: {payment_method}")
        self.payment_method = payment_method
        self.values: dict[str, str] = dict(values)
        self.errors: dict[str, str] = {}
        self.touched: set[str] = set()

    def set_value(self, name: str, value: str) -> None:
        self.values[name] = value

    def blur(self, name: str) -> str:
        self.touched.add(name)
        self.errors[name] = validate_field(name, self.values.get(name), self.payment_method)
        return self.errors[name]

    def attempt_submit(self) -> bool:
        """Touch every field, validate the whole form, report validity."""
        self.touched.update(CONTACT_FIELDS + ALL_PAYMENT_FIELDS)
        self.errors = validate_form(self.values, self.payment_method)
        return is_form_valid(self.errors)

    def change_payment_method(self, method: str) -> None:
        if method not in PAYMENT_METHODS:
            raise ValueError(f"Unknown payment method: {method}")
        self.payment_method = method
        for name in ALL_PAYMENT_FIELDS:
            self.errors[name] = ""

    def visible_error(self, name: str) -> str:
        if name not in self.touched:
            return ""
        return self.errors.get(name, "")
