from __future__ import annotations

import base64
import hashlib
from typing import Iterable, Set

TAG_PREFIX = "blocker_"
TAG_SUFFIX = "_src"

# Google allows 44 characters for an extended property key; keep well below.
DIGEST_LENGTH = 15


def tag_for(source_calendar_id: str) -> str:
    """Return the correlation tag key for a source calendar.

    The key is deterministic across runs. Distinct calendars may in theory
    collide since the digest is truncated to ``DIGEST_LENGTH`` characters.
    """
    digest = hashlib.sha256(source_calendar_id.encode("utf-8")).digest()
    encoded = base64.urlsafe_b64encode(digest).decode("ascii")
    return f"{TAG_PREFIX}{encoded[:DIGEST_LENGTH]}{TAG_SUFFIX}"


def tags_for(source_calendar_ids: Iterable[str]) -> Set[str]:
    return {tag_for(cal_id) for cal_id in source_calendar_ids}
