"""Customer model.

Customers opt into the personal-information policy, so last name, email and
phone numbers are stored encrypted, and passwords are stored hashed. The
customer id and the linked user id never change once assigned.
"""

from uuid import uuid4

from modeling.cipher import get_cipher
from modeling.guards import ValidationSpec, allow, freeze, hash_properties, require, validate
from modeling.pipeline import ModelSpec
from modeling.policy import PERSONAL_INFO
from modeling.snapshot import Snapshot

from identity.domain import identity

CUSTOMER_FIELDS = (
    "first_name",
    "last_name",
    "shipping_address",
    "billing_address",
    "credit_card_number",
    "phone",
    "email",
    "password",
)
ENCRYPTED_FIELDS = ("last_name", "email", "phone")

Customer = identity.define(
    ModelSpec(
        name="customer",
        policies=(PERSONAL_INFO,),
        mixins=(
            require("first_name", "last_name", "email"),
            hash_properties("password"),
            freeze("customer_id", "user_id"),
            allow(*CUSTOMER_FIELDS, reserved=("customer_id", "user_id")),
            validate(
                ValidationSpec("first_name", typeof=str, maxlen=50),
                ValidationSpec("credit_card_number", regex="credit_card"),
            ),
        ),
    )
)


def create_customer(
    first_name: str | None = None,
    last_name: str | None = None,
    email: str | None = None,
    phone: str | None = None,
    shipping_address: str | None = None,
    billing_address: str | None = None,
    credit_card_number: str | None = None,
    user_id: str | None = None,
    password: str | None = None,
) -> Snapshot:
    return identity.create(
        Customer.name,
        {
            "customer_id": str(uuid4()),
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "phone": phone,
            "shipping_address": shipping_address,
            "billing_address": billing_address or shipping_address,
            "credit_card_number": credit_card_number,
            "user_id": user_id,
            "password": password,
        },
    )


def update_customer(customer: Snapshot, changes) -> Snapshot:
    return identity.process_update(customer, changes)


def decrypt(customer: Snapshot) -> dict:
    """Return the customer's fields with personal information decrypted."""
    cipher = get_cipher()
    return {
        key: cipher.decrypt(value) if key in ENCRYPTED_FIELDS and value else value for key, value in customer.items()
    }


def check_password(customer: Snapshot, password: str) -> bool:
    return bool(customer.get("password")) and customer["password"] == get_cipher().hash(password)
