import datetime
import logging
from collections.abc import Iterable

from dateutil.parser import parse as parse_date

logger = logging.getLogger(__name__)


def try_parse_date(date_str: str | None) -> datetime.datetime | None:
    """Try to parse an HTTP Last-Modified header value.

    Returns:
        The parsed datetime, or None if parsing failed or date_str is None
    """
    try:
        return parse_date(date_str) if date_str else None
    except (ValueError, OverflowError) as e:
        logger.debug(f"Failed to parse date '{date_str}': {e}")
        return None


def split_tokens(value: str | Iterable[str], sep: str | None = None) -> list[str]:
    """Normalize a space-separated string or a list of strings into a token list.

    Empty strings are kept when given in a list (the identity extension is ``""``)
    but a plain string is split on ``sep`` (any whitespace by default).

    Examples:
        >>> split_tokens("main restricted")
        ['main', 'restricted']
        >>> split_tokens(" .gz .xz", sep=" ")
        ['', '.gz', '.xz']
    """
    if isinstance(value, str):
        return value.split(sep)
    return [token.strip() for token in value]
