# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import datetime
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Final
from urllib.parse import quote, unquote_to_bytes

from ._crypto import derive_signing_key, hmac_hex, sha256_hex
from ._http import URI, SignedRequest, parse_uri
from ._identity import S3Credentials
from .exceptions import SigningError

logger: Final = logging.getLogger(__name__)

SIGNING_ALGORITHM: str = "AWS4-HMAC-SHA256"
SIGV4_TIMESTAMP_FORMAT: str = "%Y%m%dT%H%M%SZ"
UNSIGNED_PAYLOAD: str = "UNSIGNED-PAYLOAD"

Clock = Callable[[], datetime.datetime]


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


@dataclass(kw_only=True, frozen=True)
class SigningContext:
    """Timestamps and credential scope shared by every step of one signature."""

    datetime_stamp: str
    """Request time formatted as ``YYYYMMDDTHHMMSSZ``."""

    date_stamp: str
    """Request date formatted as ``YYYYMMDD``."""

    region: str
    service: str

    @classmethod
    def from_datetime(
        cls, when: datetime.datetime, *, region: str, service: str
    ) -> "SigningContext":
        """Build a context from a single clock reading.

        Naive datetimes are assumed to already be in UTC.
        """
        if when.tzinfo is not None:
            when = when.astimezone(datetime.UTC)
        datetime_stamp = when.strftime(SIGV4_TIMESTAMP_FORMAT)
        return cls(
            datetime_stamp=datetime_stamp,
            date_stamp=datetime_stamp[0:8],
            region=region,
            service=service,
        )

    @property
    def scope(self) -> str:
        # Scope format: <YYYYMMDD>/<Region>/<Service>/aws4_request
        return f"{self.date_stamp}/{self.region}/{self.service}/aws4_request"


@dataclass(kw_only=True, frozen=True)
class CanonicalRequest:
    """The standardized serialization of a request used as signature input.

    ``str()`` renders the form defined by SigV4::

        <HTTPMethod>\\n
        <CanonicalURI>\\n
        <CanonicalQueryString>\\n
        <CanonicalHeaders>\\n
        <SignedHeaders>\\n
        <HashedPayload>
    """

    method: str
    canonical_uri: str
    canonical_query: str
    canonical_headers: tuple[tuple[str, str], ...]
    payload_hash: str = UNSIGNED_PAYLOAD

    @property
    def signed_headers(self) -> str:
        return ";".join(name for name, _ in self.canonical_headers)

    def __str__(self) -> str:
        canonical_fields = "".join(
            f"{name}:{value}\n" for name, value in self.canonical_headers
        )
        return (
            f"{self.method}\n"
            f"{self.canonical_uri}\n"
            f"{self.canonical_query}\n"
            f"{canonical_fields}\n"
            f"{self.signed_headers}\n"
            f"{self.payload_hash}"
        )


class S3SigV4Signer:
    """Request signer applying AWS Signature Version 4 to bodyless S3 requests.

    Payloads are never hashed: every request is signed with ``UNSIGNED-PAYLOAD``
    and exactly the ``host``, ``x-amz-content-sha256`` and ``x-amz-date`` headers.
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        """
        :param clock: Callable returning the current time. It is read exactly once
            per signed request.
        """
        self._clock = clock or utc_now

    async def sign(
        self,
        *,
        url: str,
        method: str,
        credentials: S3Credentials,
    ) -> SignedRequest:
        """Generate a SigV4 signature for a request to ``url``.

        :param url: Fully-qualified origin URL, including any query string.
        :param method: The HTTP method the request will be sent with.
        :param credentials: Access key, secret and scope to sign with.
        :raises SigningError: If the URL is malformed or the credentials are
            incomplete. No partially signed request is returned.
        """
        self._validate_credentials(credentials=credentials)
        destination = parse_uri(url)
        context = SigningContext.from_datetime(
            self._clock(), region=credentials.region, service=credentials.service
        )

        canonical_request = await self.canonical_request(
            method=method, destination=destination, context=context
        )
        string_to_sign = await self.string_to_sign(
            canonical_request=canonical_request, context=context
        )
        signature = await self.signature(
            string_to_sign=string_to_sign,
            secret_key=credentials.secret_access_key,
            context=context,
        )
        authorization = self.generate_authorization_field(
            credential=f"{credentials.access_key_id}/{context.scope}",
            signed_headers=canonical_request.signed_headers,
            signature=signature,
        )
        logger.debug(
            "Signed %s request for %s with scope %s",
            canonical_request.method,
            destination.netloc,
            context.scope,
        )

        return SignedRequest(
            method=canonical_request.method,
            destination=destination,
            fields={
                "Host": destination.netloc,
                "x-amz-date": context.datetime_stamp,
                "x-amz-content-sha256": UNSIGNED_PAYLOAD,
                "Authorization": authorization,
            },
        )

    async def canonical_request(
        self, *, method: str, destination: URI, context: SigningContext
    ) -> CanonicalRequest:
        """Build the canonical request for ``destination``.

        This is useful to quickly compare inputs to find signature mismatches and
        unintended variances.
        """
        canonical_headers = {
            "host": destination.netloc,
            "x-amz-content-sha256": UNSIGNED_PAYLOAD,
            "x-amz-date": context.datetime_stamp,
        }
        return CanonicalRequest(
            method=method.upper(),
            canonical_uri=self._format_canonical_path(path=destination.path),
            canonical_query=self._format_canonical_query(query=destination.query),
            canonical_headers=tuple(sorted(canonical_headers.items())),
        )

    async def string_to_sign(
        self, *, canonical_request: CanonicalRequest, context: SigningContext
    ) -> str:
        """Concatenate the algorithm, the signing DateTime, the credential scope and
        a hash of the canonical request.

        The SigV4 specification defines the string to sign as:
            Algorithm \\n
            RequestDateTime \\n
            CredentialScope  \\n
            HashedCanonicalRequest
        """
        return (
            f"{SIGNING_ALGORITHM}\n"
            f"{context.datetime_stamp}\n"
            f"{context.scope}\n"
            f"{sha256_hex(str(canonical_request))}"
        )

    async def signature(
        self, *, string_to_sign: str, secret_key: str, context: SigningContext
    ) -> str:
        """Sign the string to sign with a key scoped to the context's date, region
        and service."""
        signing_key = derive_signing_key(
            secret_key, context.date_stamp, context.region, context.service
        )
        return hmac_hex(signing_key, string_to_sign)

    def generate_authorization_field(
        self, *, credential: str, signed_headers: str, signature: str
    ) -> str:
        """Generate the value of the ``Authorization`` header.

        :param credential: Defined as ``<access_key>/<date>/<region>/<service>/
            aws4_request``.
        :param signed_headers: Semicolon-joined names of the signed headers.
        :param signature: Hex signature of the string to sign.
        """
        return (
            f"{SIGNING_ALGORITHM} Credential={credential}, "
            f"SignedHeaders={signed_headers}, Signature={signature}"
        )

    def _validate_credentials(self, *, credentials: S3Credentials) -> None:
        if not isinstance(credentials, S3Credentials):  # pyright: ignore
            raise SigningError(
                "Received unexpected value for credentials. Expected "
                f"S3Credentials but received {type(credentials)}."
            )
        missing = [
            name
            for name in ("access_key_id", "secret_access_key", "region", "service")
            if not getattr(credentials, name)
        ]
        if missing:
            raise SigningError(f"Missing credentials: {', '.join(missing)}")

    def _format_canonical_path(self, *, path: str | None) -> str:
        if not path:
            return "/"
        # S3 paths are encoded exactly once, so existing escapes are decoded first.
        return quote(unquote_to_bytes(path), safe="/")

    def _format_canonical_query(self, *, query: str | None) -> str:
        if not query:
            return ""
        # Entries are ordered by their decoded keys, before encoding.
        params = sorted(_parse_query(query))
        return "&".join(
            f"{quote(key, safe='')}={quote(value, safe='')}" for key, value in params
        )


def _parse_query(query: str) -> list[tuple[bytes, bytes]]:
    """Split a raw query string into decoded ``(key, value)`` byte pairs.

    Blank values are kept and ``+`` decodes to a space, following
    ``application/x-www-form-urlencoded`` parsing.
    """
    pairs: list[tuple[bytes, bytes]] = []
    for part in query.split("&"):
        if not part:
            continue
        key, _, value = part.partition("=")
        pairs.append(
            (
                unquote_to_bytes(key.replace("+", " ")),
                unquote_to_bytes(value.replace("+", " ")),
            )
        )
    return pairs
