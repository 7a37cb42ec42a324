"""
Media download blacklist: general.MediaDownloadBlackList compiled to regexes.

Compiled once per document (bootstrap and every reload) so attachments are not matched
against freshly compiled patterns. Reads the live document store, not the typed snapshot.
"""

import re

import structlog

from relay.config.document import DocumentStore
from relay.config.errors import ConfigTypeError

logger = structlog.get_logger(__name__)

BLACKLIST_KEY = "general.MediaDownloadBlackList"

MatcherSet = tuple[re.Pattern[str], ...]


def compile_blacklist(store: DocumentStore) -> MatcherSet:
    """
    Compile every blacklist pattern, in order. Invalid patterns are logged and skipped.

    Returns:
        Immutable tuple of compiled patterns (empty if the key is unset or not a list).
    """
    try:
        patterns, _ = store.get_string_list(BLACKLIST_KEY)
    except ConfigTypeError as e:
        logger.error("blacklist_invalid_type", key=BLACKLIST_KEY, error=str(e))
        return ()
    regexes: list[re.Pattern[str]] = []
    for pattern in patterns:
        logger.debug("blacklist_regex_found", pattern=pattern)
        try:
            regexes.append(re.compile(pattern))
        except re.error as e:
            logger.error("blacklist_regex_invalid", pattern=pattern, error=str(e))
            continue
    logger.debug("blacklist_applied", count=len(regexes))
    return tuple(regexes)


def matches(matchers: MatcherSet, filename: str) -> bool:
    """True if any pattern matches anywhere in filename."""
    return any(regex.search(filename) for regex in matchers)
