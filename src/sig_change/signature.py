import hmac
from typing import Union

from gidgethub import ValidationFailure
from gidgethub.sansio import validate_event


class Signature:
    def __init__(self, secret: str, algorithm: str = "sha256"):
        self.secret = secret
        self.algorithm = algorithm

    def create(self, payload: Union[str, bytes]) -> str:
        """Create a signature for the given payload."""
        if isinstance(payload, str):
            payload = payload.encode()
        return hmac.new(
            self.secret.encode(),
            payload,
            digestmod=self.algorithm,
        ).hexdigest()

    def header(self, payload: Union[str, bytes]) -> str:
        """Create a signature header value (``algorithm=hexdigest``)."""
        return f"{self.algorithm}={self.create(payload)}"


def verify_signature(raw_body: bytes, header: str | None, secret: str) -> None:
    """
    Verify a webhook signature header against the raw request body.

    Raises gidgethub.ValidationFailure if the header is missing, names an
    algorithm other than sha1 or sha256, or does not match the body.
    """
    if not header:
        raise ValidationFailure("signature is missing")
    try:
        validate_event(raw_body, signature=header, secret=secret)
    except TypeError as e:
        # hmac.compare_digest refuses non-ASCII digests
        raise ValidationFailure("signature is not a hex digest") from e
