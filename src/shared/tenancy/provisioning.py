"""Auto-provisioning of RTO records for first-seen subdomains."""

import re
import secrets
import string
from datetime import UTC, datetime, timedelta

from src.features.rto.models import Rto, default_rto_settings

AUTO_CEO_NAME = "Auto Generated"
AUTO_PHONE = "+1234567890"
RTO_NUMBER_PREFIX = "AUTO"
REGISTRATION_PERIOD = timedelta(days=365)

_RTO_NUMBER_ALPHABET = string.ascii_uppercase + string.digits


def derive_company_name(subdomain: str) -> str:
    """Display name for an auto-provisioned RTO.

    Hyphens and underscores become spaces and each word is capitalised:
    "acme" -> "Acme", "skills-train_academy" -> "Skills Train Academy".
    """
    words = [word for word in re.split(r"[-_]+", subdomain) if word]
    return " ".join(word[:1].upper() + word[1:] for word in words) or subdomain


def generate_rto_number() -> str:
    """Pseudo-unique registration number, e.g. AUTO7K2QXM."""
    return RTO_NUMBER_PREFIX + "".join(secrets.choice(_RTO_NUMBER_ALPHABET) for _ in range(6))


def build_provisioned_rto(subdomain: str, created_by: str | None = None, now: datetime | None = None) -> Rto:
    """Build (but do not persist) the RTO record for a first-seen subdomain.

    Contact fields are placeholders to be completed by a platform admin later.
    """
    now = now or datetime.now(UTC)
    return Rto(
        subdomain=subdomain,
        company_name=derive_company_name(subdomain),
        ceo_name=AUTO_CEO_NAME,
        ceo_code=subdomain[:3].upper() + "001",
        email=f"admin@{subdomain}.com",
        phone=AUTO_PHONE,
        rto_number=generate_rto_number(),
        registration_date=now,
        expiry_date=now + REGISTRATION_PERIOD,
        is_active=True,
        is_verified=True,
        settings=default_rto_settings(),
        created_by=created_by,
    )
