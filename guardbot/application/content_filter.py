"""Классификаторы запрещённого контента."""

from __future__ import annotations

import re
from typing import Iterable

from guardbot.application.models import MediaKind

LINK_PATTERN = re.compile(r"https?://|t\.me/|www\.", re.IGNORECASE)

RESTRICTED_MEDIA = frozenset(MediaKind)


def is_link_content(text: str) -> bool:
    return bool(text) and LINK_PATTERN.search(text) is not None


def has_restricted_media(media: Iterable[MediaKind]) -> bool:
    return any(kind in RESTRICTED_MEDIA for kind in media)
