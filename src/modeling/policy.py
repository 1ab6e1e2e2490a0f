"""Cross-cutting guard policies shared by several models."""

from modeling.guards import check_format, encrypt
from modeling.pipeline import Policy

# Personal information is encrypted at rest; contact details are format
# checked before they are encrypted.
PERSONAL_INFO = Policy(
    name="personal_info",
    mixins=(
        encrypt(
            "last_name",
            "address",
            check_format("email", "email"),
            check_format("phone", "phone"),
            check_format("mobile", "phone"),
            "credit_card",
            "ccv",
            "ssn",
            name="encrypt_personal_info",
        ),
    ),
)
