from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal, Mapping, Optional, Sequence

if TYPE_CHECKING:
    from .scoring_config import ScoringConfig

ConfigMode = Literal["strict", "warn"]


class Status(str, Enum):
    VALID = "valid"
    MODERATE = "moderate"
    SPAM = "spam"

    @classmethod
    def from_score(cls, score: int) -> "Status":
        if score >= 1:
            return cls.VALID
        if score == 0:
            return cls.MODERATE
        return cls.SPAM


def _coerce_count(value: Any) -> Optional[int]:
    """Return a non-negative count or ``None`` when the value carries no information."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        return int(value) if value >= 0 and value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = int(text)
        except ValueError:
            return None
        return number if number >= 0 else None
    return None


def _coerce_bodies(value: Any) -> Optional[tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Sequence):
        return tuple(item for item in value if isinstance(item, str))
    return None


def _optional_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


@dataclass(frozen=True, slots=True)
class Comment:
    """A submitted comment. Only ``body`` is mandatory."""

    body: str
    author: Optional[str] = None
    email: Optional[str] = None
    url: Optional[str] = None
    previously_accepted_for_email: Optional[int] = None
    previously_rejected_for_email: Optional[int] = None
    previous_comment_bodies: Optional[tuple[str, ...]] = None

    def __post_init__(self) -> None:
        if not isinstance(self.body, str):
            raise TypeError("Comment.body must be a string")
        object.__setattr__(self, "previously_accepted_for_email", _coerce_count(self.previously_accepted_for_email))
        object.__setattr__(self, "previously_rejected_for_email", _coerce_count(self.previously_rejected_for_email))
        object.__setattr__(self, "previous_comment_bodies", _coerce_bodies(self.previous_comment_bodies))

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "Comment":
        body = payload.get("body")
        if not isinstance(body, str):
            raise ValueError("comment payload requires a string 'body'")
        return cls(
            body=body,
            author=_optional_text(payload.get("author")),
            email=_optional_text(payload.get("email")),
            url=_optional_text(payload.get("url")),
            previously_accepted_for_email=payload.get("previously_accepted_for_email"),
            previously_rejected_for_email=payload.get("previously_rejected_for_email"),
            previous_comment_bodies=payload.get("previous_comment_bodies"),
        )


@dataclass(frozen=True, slots=True)
class RuleHit:
    rule_id: str
    delta: int
    detail: str = ""


@dataclass(frozen=True, slots=True)
class ScoreResult:
    score: int
    hits: tuple[RuleHit, ...] = ()

    @property
    def status(self) -> Status:
        return Status.from_score(self.score)

    def as_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "status": self.status.value,
            "hits": [
                {"rule_id": hit.rule_id, "delta": hit.delta, "detail": hit.detail}
                for hit in self.hits
            ],
        }


@dataclass(frozen=True, slots=True)
class Link:
    """A hyperlink found in a comment body."""

    href: str
    text: str = ""


@dataclass(frozen=True, slots=True)
class PreparedComment:
    """A comment with its body parsed once for every rule to share."""

    comment: Comment
    text: str
    links: tuple[Link, ...]
    urls: tuple[str, ...]


@dataclass(slots=True)
class ValidationIssue:
    level: Literal["error", "warning"]
    code: str
    where: str
    msg: str
    hint: str | None = None


@dataclass(slots=True)
class LoadResult:
    status: Literal["ok", "invalid", "error"]
    mode: ConfigMode
    config: ScoringConfig | None
    issues: list[ValidationIssue]
    counts: dict[str, int] = field(default_factory=dict)
