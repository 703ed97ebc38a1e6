"""Field validation for new photos.

Rules are an ordered list of (field, predicate, message). Every rule runs,
so a request with several problems gets every message back at once, in
declaration order (title rules before image_url rules).

A predicate receives the field's value, or MISSING when the client did not
send the field at all, and returns True when the value is acceptable.
"""

from typing import Any, Callable, NamedTuple

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()

_url_adapter = TypeAdapter(AnyHttpUrl)


class Rule(NamedTuple):
    field: str
    check: Callable[[Any], bool]
    message: str


class PhotoValidationError(Exception):
    """Raised with every violated rule's message."""

    def __init__(self, messages: list[str]):
        self.messages = messages
        super().__init__("; ".join(messages))


def is_present(value: Any) -> bool:
    return value is not MISSING and value is not None


def is_string(value: Any) -> bool:
    # Absence is reported by is_present, not here
    return not is_present(value) or isinstance(value, str)


def is_not_empty(value: Any) -> bool:
    return not is_present(value) or value != ""


def is_url(value: Any) -> bool:
    """Absolute http(s) URL with a host.

    Absent, empty and non-string values pass; other rules report them.
    """
    if not isinstance(value, str) or value == "":
        return True
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


PHOTO_RULES: list[Rule] = [
    Rule("title", is_present, "Title cannot be omitted"),
    Rule("title", is_string, "Title must be a string"),
    Rule("title", is_not_empty, "Title cannot be an empty string"),
    Rule("image_url", is_present, "Image URL cannot be omitted"),
    Rule("image_url", is_string, "Image URL must be a string"),
    Rule("image_url", is_not_empty, "Image URL cannot be an empty string"),
    Rule("image_url", is_url, "Wrong URL format"),
]


def collect_violations(data: dict[str, Any], rules: list[Rule] = PHOTO_RULES) -> list[str]:
    """Run every rule against data and return the failing messages in order."""
    return [
        rule.message
        for rule in rules
        if not rule.check(data.get(rule.field, MISSING))
    ]


def derive_caption(title: str, image_url: str) -> str:
    """Upper-cased title, one space, then the image URL."""
    return f"{title.upper()} {image_url}"


def validate_new_photo(data: dict[str, Any], owner_id: int) -> dict[str, Any]:
    """Validate client input and build the values for a new photo row.

    The caption is always derived and the owner always comes from the
    authenticated identity; client-sent caption/UserId are discarded.
    Raises PhotoValidationError listing every violation.
    """
    violations = collect_violations(data)
    if violations:
        raise PhotoValidationError(violations)

    return {
        "title": data["title"],
        "image_url": data["image_url"],
        "caption": derive_caption(data["title"], data["image_url"]),
        "user_id": owner_id,
    }
