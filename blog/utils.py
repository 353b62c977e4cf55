import pendulum
from slugify import slugify

DEFAULT_SLUG = "post"
EXCERPT_LENGTH = 200


def make_slug(title: str) -> str:
    return slugify(title or "") or DEFAULT_SLUG


def derive_excerpt(content: str, length: int = EXCERPT_LENGTH) -> str:
    return content.strip()[:length].rstrip()


def utc_now() -> str:
    # Fixed width so that string order matches time order
    return pendulum.now("UTC").isoformat(timespec="microseconds")
