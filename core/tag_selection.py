# core/tag_selection.py
import re
import logging
from datetime import datetime
from typing import Final, Iterable, Optional, Tuple
from model.quay import QuayTag

logger = logging.getLogger(__name__)

# RFC1123 with a numeric zone, e.g. "Mon, 02 Jan 2006 15:04:05 -0700".
# A one-digit hour and fractional seconds after the seconds are accepted.
LAST_MODIFIED_FORMAT: Final[str] = "%a, %d %b %Y %H:%M:%S %z"
_LAST_MODIFIED_SHAPE: Final[re.Pattern[str]] = re.compile(
    r"([A-Za-z]{3}, \d{2} [A-Za-z]{3} \d{4} \d{1,2}:\d{2}:\d{2})"
    r"(?:[.,](\d+))?"
    r" ([+-]\d{4})"
)
DIGEST_PREFIX: Final[str] = "sha256:"
IDENTIFIER_SEPARATOR: Final[str] = "/"


def split_identifier(identifier: str) -> Optional[Tuple[str, str]]:
    """
    Split "namespace/repository" into its two segments.
    Returns None for any other shape (zero or several separators).
    """
    parts = identifier.split(IDENTIFIER_SEPARATOR)
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


def parse_last_modified(value: str) -> datetime:
    """
    Parse a Quay `last_modified` value. Raises ValueError when the text is not
    in LAST_MODIFIED_FORMAT; no other formats are attempted.
    """
    m = _LAST_MODIFIED_SHAPE.fullmatch(value)
    if m is None:
        raise ValueError(f"time data {value!r} does not match {LAST_MODIFIED_FORMAT!r}")
    head, fraction, zone = m.groups()
    ts = datetime.strptime(f"{head} {zone}", LAST_MODIFIED_FORMAT)
    if fraction:
        ts = ts.replace(microsecond=int(fraction[:6].ljust(6, "0")))
    return ts


def select_latest(tags: Iterable[QuayTag]) -> Optional[Tuple[QuayTag, datetime]]:
    """
    Pick the tag with the greatest parseable `last_modified`.
    - Unparseable timestamps are logged and skipped.
    - Strict ">" keeps the first tag on exact ties.
    Returns None when no timestamp could be parsed.
    """
    latest: Optional[Tuple[QuayTag, datetime]] = None
    for tag in tags:
        try:
            ts = parse_last_modified(tag.last_modified)
        except ValueError as e:
            logger.warning(
                "quay.tag.time.invalid tag=%s value=%r err=%s",
                tag.name,
                tag.last_modified,
                e,
            )
            continue
        if latest is None or ts > latest[1]:
            latest = (tag, ts)
    return latest


def strip_digest_prefix(digest: str) -> str:
    if digest.startswith(DIGEST_PREFIX):
        return digest[len(DIGEST_PREFIX):]
    return digest
