"""
User-facing messages for resolution failures.

Every ``AttemptErrorKind`` maps to one stable message key; the ``Localizer``
turns a key plus arguments into text.
"""

from typing import Any

from loguru import logger

from citecount.counts.resolution_types import AttemptErrorKind

ERROR_MESSAGE_KEYS = {
    AttemptErrorKind.MISSING_IDENTIFIER: 'citationcounts-error-missing-identifier',
    AttemptErrorKind.INSUFFICIENT_METADATA: 'citationcounts-error-insufficient-metadata',
    AttemptErrorKind.NOT_FOUND: 'citationcounts-error-not-found',
    AttemptErrorKind.NO_CITATION_COUNT: 'citationcounts-error-no-citation-count',
    AttemptErrorKind.RATE_LIMITED: 'citationcounts-error-rate-limit',
    AttemptErrorKind.AUTH_FAILURE: 'citationcounts-error-auth',
    AttemptErrorKind.SERVER_ERROR: 'citationcounts-error-server-error',
    AttemptErrorKind.BAD_REQUEST: 'citationcounts-error-bad-request',
    AttemptErrorKind.NETWORK_FAILURE: 'citationcounts-error-network',
    AttemptErrorKind.UNKNOWN: 'citationcounts-error-unknown',
    AttemptErrorKind.NO_RESULTS_ALL_ATTEMPTS: 'citationcounts-error-no-results-all-attempts',
}

EN_US_MESSAGES = {
    'citationcounts-progress-headline': 'Getting citation counts from {provider}',
    'citationcounts-progress-finished-headline': 'Finished getting citation counts from {provider}',
    'citationcounts-error-missing-identifier': 'No identifier to look up on {provider}',
    'citationcounts-error-insufficient-metadata': 'Not enough title, author or year data to search {provider}',
    'citationcounts-error-not-found': 'Item not found on {provider}',
    'citationcounts-error-no-citation-count': '{provider} returned no citation count',
    'citationcounts-error-rate-limit': '{provider} rate limit exceeded, try again later',
    'citationcounts-error-auth': '{provider} rejected the request, check the API key',
    'citationcounts-error-server-error': '{provider} server error, try again later',
    'citationcounts-error-bad-request': '{provider} rejected the request as invalid',
    'citationcounts-error-network': 'Could not reach {provider}, check the network connection',
    'citationcounts-error-unknown': 'Unknown error while getting the citation count from {provider}',
    'citationcounts-error-no-results-all-attempts': '{provider} found no results by DOI, arXiv identifier or title',
}


def message_key_for(kind: AttemptErrorKind) -> str:
    return ERROR_MESSAGE_KEYS[kind]


class Localizer:
    """Formats message keys using a catalog of templates."""

    def __init__(self, messages: dict[str, str] | None = None) -> None:
        self.messages = dict(EN_US_MESSAGES if messages is None else messages)

    def format(self, key: str, args: dict[str, Any] | None = None) -> str:
        """
        Format the message for ``key``.

        Unknown keys and templates with missing arguments fall back to the
        key itself so a failure is still reported.
        """
        template = self.messages.get(key)
        if template is None:
            logger.warning(f'No message for key {key!r}')
            return key
        try:
            return template.format(**(args or {}))
        except KeyError as e:
            logger.warning(f'Missing argument {e} for message {key!r}')
            return template
