"""
Slug generation for organization and document identifiers.
"""
from slugify import slugify

from app.core.errors import ValidationError


def make_slug(text: str) -> str:
    """
    Lowercase ASCII slug of ``text``.

    Requested slugs go through the same transform as derived ones, so equal
    inputs always collide on the uniqueness constraints.

    Raises:
        ValidationError: nothing usable is left after slugifying
    """
    slug = slugify(text or "", lowercase=True)
    if not slug:
        raise ValidationError("Slug must contain at least one letter or digit")
    return slug
