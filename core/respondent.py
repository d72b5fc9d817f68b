import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from core.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ViewerTier(str, Enum):
    ANONYMOUS = "anonymous"
    FREE = "free"
    PARTNER = "partner"
    COVENANT = "covenant"

    @property
    def is_authenticated(self) -> bool:
        return self is not ViewerTier.ANONYMOUS

    @property
    def is_paid(self) -> bool:
        return self in (ViewerTier.PARTNER, ViewerTier.COVENANT)

    @classmethod
    def from_member_tier(cls, tier: Optional[str]) -> "ViewerTier":
        """Members without a recorded tier are treated as free members."""
        if not tier:
            return cls.FREE
        try:
            value = cls(tier.lower())
        except ValueError:
            return cls.FREE
        return cls.FREE if value is cls.ANONYMOUS else value


def normalize_email(email: str) -> str:
    email = (email or "").strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError(f"Invalid email address: {email!r}")
    return email


@dataclass(frozen=True)
class Respondent:
    """
    Whoever is taking an assessment.

    Members are identified by their member id; anonymous respondents only
    become identifiable once they hand over an email address.
    """

    member_id: Optional[str] = None
    email: Optional[str] = None
    tier: ViewerTier = ViewerTier.ANONYMOUS

    @property
    def key(self) -> Optional[str]:
        if self.member_id:
            return f"member:{self.member_id}"
        if self.email:
            return f"email:{self.email}"
        return None

    @property
    def is_identified(self) -> bool:
        return self.key is not None

    def with_email(self, email: str) -> "Respondent":
        return replace(self, email=normalize_email(email))

    def to_dict(self):
        return {"member_id": self.member_id, "email": self.email, "tier": self.tier.value}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Respondent":
        data = data or {}
        return cls(
            member_id=data.get("member_id"),
            email=data.get("email"),
            tier=ViewerTier(data.get("tier") or ViewerTier.ANONYMOUS.value),
        )
