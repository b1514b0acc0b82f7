"""EmailAddress value object for validated email addresses."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from store.domain import store


@store.value_object
class EmailAddress:
    """A structurally valid email address: one ``@``, non-empty local part and a dotted domain."""

    address: String(required=True, max_length=254)

    @invariant.post
    def verify_email_address(self):
        email = self.address
        error = ValidationError({"email": [f"Invalid email address: {email!r}"]})

        if any(ch.isspace() for ch in email) or email.count("@") != 1:
            raise error

        local_part, domain_part = email.split("@", 1)
        if not local_part or local_part.startswith(".") or local_part.endswith("."):
            raise error
        if "." not in domain_part or domain_part.startswith(".") or domain_part.endswith("."):
            raise error
        if ".." in email:
            raise error
