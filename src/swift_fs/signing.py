"""Swift TempURL signing.

A temporary URL grants anonymous, time-limited access to one object. The
signature is an HMAC over three newline-separated lines:

    <METHOD>
    <expires, integer Unix seconds>
    <object path, starting at the API version segment>

e.g. ``GET\\n1700000000\\n/v1/AUTH_acct/container/key``. The path is the
decoded one: Swift signs its unquoted PATH_INFO, while the returned URL keeps
the percent-encoded form. The server rebuilds the same string, so any
difference in ordering, separators, encoding or timestamp units yields a
URL it rejects.
"""

import hashlib
import hmac
from datetime import datetime, timezone
from urllib.parse import unquote

from swift_fs.exceptions import SigningPreconditionError

VERSION_MARKER = "/v1/"

ALLOWED_METHODS = frozenset({"GET", "HEAD", "PUT", "POST", "DELETE"})

SUPPORTED_DIGESTS = frozenset({"sha1", "sha256", "sha512"})


def split_object_url(object_url: str, marker: str = VERSION_MARKER) -> tuple[str, str]:
    """Split an object URL into base URL and versioned object path.

    "https://swift.example.com/v1/AUTH_a/c/k" becomes
    ("https://swift.example.com", "/v1/AUTH_a/c/k").

    Raises:
        SigningPreconditionError: If the URL has no version segment
    """
    base_url, found, rest = object_url.partition(marker)
    if not found or not base_url or not rest:
        raise SigningPreconditionError(
            f"Object URL {object_url!r} does not contain the {marker!r} segment"
        )
    return base_url, f"{marker}{rest}"


def expires_timestamp(expires_at: datetime | int | float) -> int:
    """Convert an expiry into integer Unix seconds. Naive datetimes are UTC."""
    if isinstance(expires_at, datetime):
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return int(expires_at.timestamp())
    return int(expires_at)


def signature_body(method: str, expires: int, object_path: str) -> str:
    return f"{method}\n{expires}\n{object_path}"


def compute_signature(
    secret_key: str,
    method: str,
    expires: int,
    object_path: str,
    digest: str = "sha256",
) -> str:
    """Return the hex HMAC signature for a temporary URL."""
    body = signature_body(method, expires, object_path)
    return hmac.new(
        secret_key.encode("utf-8"), body.encode("utf-8"), getattr(hashlib, digest)
    ).hexdigest()


def build_temporary_url(base_url: str, object_path: str, signature: str, expires: int) -> str:
    return f"{base_url}{object_path}?temp_url_sig={signature}&temp_url_expires={expires}"


class TemporaryUrlSigner:
    """Signs object URLs with a shared TempURL key.

    Example:
        signer = TemporaryUrlSigner("secret")
        url = signer.sign("https://swift/v1/AUTH_a/c/report.pdf", expires_at=1700000000)
    """

    def __init__(self, secret_key: str, digest: str = "sha256") -> None:
        """Initialize the signer.

        Args:
            secret_key: Value of the account or container Temp-URL-Key
            digest: hashlib digest name used for the HMAC
        """
        if not secret_key:
            raise SigningPreconditionError("A temporary URL key is required")
        if digest not in SUPPORTED_DIGESTS:
            raise SigningPreconditionError(f"Unsupported digest: {digest}")
        self._secret_key = secret_key
        self.digest = digest

    def sign(
        self,
        object_url: str,
        expires_at: datetime | int | float,
        method: str = "GET",
    ) -> str:
        """Return a temporary URL for an object.

        ``object_url`` is the percent-encoded URL the store reports.

        Raises:
            SigningPreconditionError: If the URL cannot be decomposed or the
                method is not one Swift signs
        """
        method = method.upper().strip()
        if method not in ALLOWED_METHODS:
            raise SigningPreconditionError(f"Method {method!r} cannot be signed")
        base_url, object_path = split_object_url(object_url)
        expires = expires_timestamp(expires_at)
        signature = compute_signature(
            self._secret_key, method, expires, unquote(object_path), self.digest
        )
        return build_temporary_url(base_url, object_path, signature, expires)

    def __repr__(self) -> str:
        return f"TemporaryUrlSigner(digest={self.digest!r})"
