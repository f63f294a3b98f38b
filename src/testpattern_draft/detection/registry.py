"""Built-in detector catalogue.

Each :class:`DetectorSpec` pairs a compiled regex with an optional semantic
validator and the metadata copied into draft records.  The catalogue is an
ordered tuple; detectors are evaluated, and their records emitted, in this
order.

``pattern_template`` is the canonical pattern text written to records.  It
is kept separately from the compiled ``regex`` because the two are allowed
to differ in escaping (and, for IPv4, in strictness).
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from testpattern_draft.detection.validators import ValidatorKind


@dataclass(frozen=True)
class NegativeCase:
    """A value a detector's pattern should not match, with the reason."""

    value: str
    description: str


@dataclass(frozen=True)
class DetectorSpec:
    """Immutable description of one known sensitive-data shape.

    Attributes
    ----------
    name:
        Human-readable detector name (e.g. ``"Email Address"``).
    slug:
        Unique catalogue identifier, also the base of the draft slug.
    regex:
        Compiled pattern scanned over token values.
    pattern_template:
        Canonical pattern text emitted in draft records.
    confidence:
        ``"high"``, ``"medium"`` or ``"low"``.
    validator:
        Optional :class:`ValidatorKind` every raw match must pass.
    """

    name: str
    slug: str
    regex: re.Pattern[str]
    pattern_template: str
    confidence: str
    data_categories: tuple[str, ...]
    jurisdictions: tuple[str, ...]
    regulations: tuple[str, ...]
    context_keywords: tuple[str, ...]
    negative_cases: tuple[NegativeCase, ...]
    validator: ValidatorKind | None = None

    def generate_negatives(self) -> list[NegativeCase]:
        """Return the authored should-not-match cases for this detector."""
        return list(self.negative_cases)


def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.ASCII)


def _compile_unicode_space(pattern: str) -> re.Pattern[str]:
    # \s must cover Unicode spaces such as U+00A0; digits are spelled [0-9].
    return re.compile(pattern)


# ---------------------------------------------------------------------------
# Contact details
# ---------------------------------------------------------------------------
EMAIL = DetectorSpec(
    name="Email Address",
    slug="global-email-address",
    regex=_compile(r"[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}"),
    pattern_template=r"[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}",
    confidence="high",
    data_categories=("pii",),
    jurisdictions=("global",),
    regulations=("general-data-protection",),
    context_keywords=("email", "e-mail", "mail", "contact", "address"),
    negative_cases=(
        NegativeCase("not-an-email", "Plain text without @ symbol"),
        NegativeCase("user@", "Missing domain after @ symbol"),
    ),
)

# ---------------------------------------------------------------------------
# Financial identifiers
# ---------------------------------------------------------------------------
_CREDIT_CARD_PATTERN = (
    r"\b(?:4[0-9]{12}(?:[0-9]{3})?"         # Visa
    r"|5[1-5][0-9]{14}"                       # MasterCard
    r"|3[47][0-9]{13}"                        # Amex
    r"|3(?:0[0-5]|[68][0-9])[0-9]{11}"       # Diners Club
    r"|6(?:011|5[0-9]{2})[0-9]{12}"          # Discover
    r"|(?:2131|1800|35\d{3})\d{11})\b"       # JCB
)

CREDIT_CARD = DetectorSpec(
    name="Credit Card Number",
    slug="global-credit-card-number",
    regex=_compile(_CREDIT_CARD_PATTERN),
    pattern_template=_CREDIT_CARD_PATTERN,
    confidence="high",
    data_categories=("financial",),
    jurisdictions=("global",),
    regulations=("pci-dss",),
    context_keywords=("credit card", "card number", "CC", "CVV", "expiry", "cardholder"),
    negative_cases=(
        NegativeCase("1234567890123456", "16-digit number with no valid card network prefix"),
        NegativeCase("0000000000000000", "All-zeros string does not match any card prefix"),
    ),
    validator=ValidatorKind.LUHN,
)

IBAN = DetectorSpec(
    name="IBAN",
    slug="global-iban",
    regex=_compile(r"\b[A-Z]{2}\d{2}[A-Z0-9]{4,30}\b"),
    pattern_template=r"\b[A-Z]{2}\d{2}[A-Z0-9]{4,30}\b",
    confidence="high",
    data_categories=("financial",),
    jurisdictions=("global",),
    regulations=("psd2", "gdpr"),
    context_keywords=("IBAN", "bank account", "account number", "bank transfer", "wire transfer"),
    negative_cases=(
        NegativeCase("AB12", "Too short to be a valid IBAN"),
        NegativeCase("1234567890", "Numeric string without country prefix"),
    ),
)

# ---------------------------------------------------------------------------
# Network and device identifiers
# ---------------------------------------------------------------------------
IPV4_ADDRESS = DetectorSpec(
    name="IPv4 Address",
    slug="global-ipv4-address",
    # Loose shape only; octet ranges are enforced by the validator.
    regex=_compile(r"\b(\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3})\b"),
    pattern_template=(
        r"\b(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
        r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\b"
    ),
    confidence="high",
    data_categories=("network",),
    jurisdictions=("global",),
    regulations=("general-data-protection",),
    context_keywords=("IP", "address", "host", "server", "network", "subnet"),
    negative_cases=(
        NegativeCase("999.999.999.999", "Octets exceed the valid 0-255 range"),
        NegativeCase("1.2.3", "Only three octets, not a valid IPv4 address"),
    ),
    validator=ValidatorKind.IPV4_OCTETS,
)

IPV6_ADDRESS = DetectorSpec(
    name="IPv6 Address",
    slug="global-ipv6-address",
    regex=_compile(r"\b(?:[0-9a-fA-F]{1,4}:){7}[0-9a-fA-F]{1,4}\b"),
    pattern_template=r"\b(?:[0-9a-fA-F]{1,4}:){7}[0-9a-fA-F]{1,4}\b",
    confidence="high",
    data_categories=("network",),
    jurisdictions=("global",),
    regulations=("general-data-protection",),
    context_keywords=("IPv6", "address", "host", "network"),
    negative_cases=(
        NegativeCase("1234:5678", "Too few groups for a valid IPv6 address"),
        NegativeCase("zzzz:zzzz:zzzz:zzzz:zzzz:zzzz:zzzz:zzzz", "Non-hex characters"),
    ),
)

MAC_ADDRESS = DetectorSpec(
    name="MAC Address",
    slug="global-mac-address",
    regex=_compile(r"\b(?:[0-9A-Fa-f]{2}[:\-]){5}[0-9A-Fa-f]{2}\b"),
    pattern_template=r"\b(?:[0-9A-Fa-f]{2}[:\-]){5}[0-9A-Fa-f]{2}\b",
    confidence="high",
    data_categories=("device-id", "network"),
    jurisdictions=("global",),
    regulations=("general-data-protection",),
    context_keywords=("MAC", "mac address", "hardware address", "physical address", "device"),
    negative_cases=(
        NegativeCase("GG:HH:II:JJ:KK:LL", "Non-hex characters in MAC address format"),
        NegativeCase("00:11:22:33:44", "Only 5 groups instead of 6"),
    ),
)

UUID = DetectorSpec(
    name="UUID",
    slug="global-uuid",
    regex=_compile(
        r"\b[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}\b"
    ),
    pattern_template=(
        r"\b[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}\b"
    ),
    confidence="high",
    data_categories=("device-id",),
    jurisdictions=("global",),
    regulations=("general-data-protection",),
    context_keywords=("UUID", "GUID", "identifier", "ID", "unique"),
    negative_cases=(
        NegativeCase("12345678-1234-1234-1234", "Missing the last group"),
        NegativeCase("not-a-uuid-at-all-nope", "Text that superficially resembles UUID format"),
    ),
)

# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------
JWT = DetectorSpec(
    name="JSON Web Token",
    slug="global-jwt",
    regex=_compile(r"\beyJ[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}\b"),
    pattern_template=r"\beyJ[A-Za-z0-9_\-]{10,}\.[A-Za-z0-9_\-]{10,}\.[A-Za-z0-9_\-]{10,}\b",
    confidence="high",
    data_categories=("credentials", "security"),
    jurisdictions=("global",),
    regulations=("general-data-protection",),
    context_keywords=("JWT", "token", "bearer", "authorization", "auth"),
    negative_cases=(
        NegativeCase("eyJnot.valid", "Too few segments for a JWT"),
        NegativeCase("notaJWT.at.all", "Does not start with eyJ prefix"),
    ),
)

AWS_ACCESS_KEY = DetectorSpec(
    name="AWS Access Key",
    slug="global-aws-access-key",
    regex=_compile(r"\b(A3T[A-Z0-9]|AKIA|AGPA|AIDA|AROA|AIPA|ANPA|ANVA|ASIA)[A-Z0-9]{16}\b"),
    pattern_template=r"\b(A3T[A-Z0-9]|AKIA|AGPA|AIDA|AROA|AIPA|ANPA|ANVA|ASIA)[A-Z0-9]{16}\b",
    confidence="high",
    data_categories=("credentials", "security"),
    jurisdictions=("global",),
    regulations=("general-data-protection",),
    context_keywords=("AWS", "access key", "secret key", "api key", "credentials"),
    negative_cases=(
        NegativeCase("INVALID_DATA_123", "Random string that does not match the expected format"),
        NegativeCase("ABCDIOSFODNN7EXAMPLE", "Invalid prefix not matching any AWS key type"),
    ),
)

# ---------------------------------------------------------------------------
# Personal identifiers
# ---------------------------------------------------------------------------
US_SSN = DetectorSpec(
    name="US Social Security Number",
    slug="us-social-security-number",
    regex=_compile(r"\b\d{3}-\d{2}-\d{4}\b"),
    pattern_template=r"\b\d{3}-\d{2}-\d{4}\b",
    confidence="medium",
    data_categories=("pii", "government-id"),
    jurisdictions=("us",),
    regulations=("ccpa",),
    context_keywords=("SSN", "social security", "social security number", "SS#"),
    negative_cases=(
        NegativeCase("000-00-0000", "All-zeros SSN is invalid"),
        NegativeCase("123-45-6789-0", "Extra digit group after valid SSN format"),
    ),
)

PHONE_INTERNATIONAL = DetectorSpec(
    name="Phone Number (International)",
    slug="global-phone-number",
    regex=_compile_unicode_space(
        r"\+[0-9]{1,3}[\s-]?\(?[0-9]{1,4}\)?[\s-]?[0-9]{3,5}[\s-]?[0-9]{3,5}"
    ),
    pattern_template=r"\+\d{1,3}[\s-]?\(?\d{1,4}\)?[\s-]?\d{3,5}[\s-]?\d{3,5}",
    confidence="medium",
    data_categories=("pii",),
    jurisdictions=("global",),
    regulations=("general-data-protection",),
    context_keywords=("phone", "telephone", "mobile", "cell", "contact", "fax"),
    negative_cases=(
        NegativeCase("12345", "Short number without international prefix"),
        NegativeCase("+1", "Country code only, no subscriber number"),
    ),
)

ISO_DATE = DetectorSpec(
    name="ISO Date",
    slug="global-iso-date",
    regex=_compile(r"\b(\d{4})-(\d{2})-(\d{2})\b"),
    pattern_template=r"\b\d{4}-\d{2}-\d{2}\b",
    confidence="medium",
    data_categories=("pii",),
    jurisdictions=("global",),
    regulations=("general-data-protection",),
    context_keywords=("date", "born", "birthday", "DOB", "date of birth", "created", "updated"),
    negative_cases=(
        NegativeCase("2024-13-01", "Invalid month (13)"),
        NegativeCase("2024-00-15", "Invalid month (00)"),
    ),
    validator=ValidatorKind.CALENDAR_DATE,
)

# ---------------------------------------------------------------------------
# Locators
# ---------------------------------------------------------------------------
URL = DetectorSpec(
    name="URL",
    slug="global-url",
    regex=_compile_unicode_space(r"""https?://[^\s"'<>]+"""),
    pattern_template=r"""https?:\/\/[^\s"'<>]+""",
    confidence="medium",
    data_categories=("network",),
    jurisdictions=("global",),
    regulations=("general-data-protection",),
    context_keywords=("URL", "link", "website", "http", "endpoint"),
    negative_cases=(
        NegativeCase("ftp://example.com", "FTP protocol, not HTTP/HTTPS"),
        NegativeCase("not a url", "Plain text without URL structure"),
    ),
)

# ---------------------------------------------------------------------------
# Exported catalogue (evaluation order)
# ---------------------------------------------------------------------------
BUILTIN_DETECTORS: tuple[DetectorSpec, ...] = (
    EMAIL,
    CREDIT_CARD,
    IBAN,
    IPV4_ADDRESS,
    IPV6_ADDRESS,
    MAC_ADDRESS,
    UUID,
    JWT,
    AWS_ACCESS_KEY,
    US_SSN,
    PHONE_INTERNATIONAL,
    ISO_DATE,
    URL,
)

_BY_SLUG: dict[str, DetectorSpec] = {d.slug: d for d in BUILTIN_DETECTORS}

if len(_BY_SLUG) != len(BUILTIN_DETECTORS):
    raise RuntimeError("Detector slugs must be unique")


def get_detector(slug: str) -> DetectorSpec:
    """Return the catalogue entry with *slug*.

    Raises
    ------
    KeyError
        When no detector has that slug.
    """
    try:
        return _BY_SLUG[slug]
    except KeyError:
        raise KeyError(f"Unknown detector slug: {slug!r}") from None
