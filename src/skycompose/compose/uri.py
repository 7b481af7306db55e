"""Link detection in free post text.

Finds the first link-like token in a post so it can become a link-preview
card.  Two shapes are recognised, each preceded by the start of the text,
whitespace or an opening parenthesis:

* an explicit ``http://`` / ``https://`` URL;
* a bare lowercase domain (``example.com/path``), which only counts when
  its domain ends in a known public suffix and is then given ``https://``.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Protocol

from publicsuffixlist import PublicSuffixList

from skycompose.errors import SkyComposeUnknownDomainSuffixError

_URI_RE = re.compile(
    r"(?:^|\s|\()"
    r"((?:https?://\S+)|(?:(?P<domain>[a-z][a-z0-9]*(?:\.[a-z0-9]+)+)\S*))"
)

# One trailing character of sentence punctuation is not part of the link.
_TRAILING_PUNCT_RE = re.compile(r"[.,;:!?]$")


class SuffixChecker(Protocol):
    """Public-suffix collaborator used to validate bare domains."""

    def is_known_suffix(self, domain: str) -> bool:
        """Return ``True`` if *domain* ends in a registered public suffix."""
        ...


@lru_cache(maxsize=1)
def _bundled_suffix_list() -> PublicSuffixList:
    # Parsing the bundled list takes a noticeable moment; do it once.
    return PublicSuffixList(accept_unknown=False)


class PublicSuffixChecker:
    """:class:`SuffixChecker` backed by the ``publicsuffixlist`` package.

    Unknown suffixes are rejected rather than treated as implicit
    single-label suffixes, so ``foo.invalidtld`` is not a domain.
    """

    def __init__(self, suffix_list: PublicSuffixList | None = None) -> None:
        self._psl = suffix_list if suffix_list is not None else _bundled_suffix_list()

    def is_known_suffix(self, domain: str) -> bool:
        return self._psl.publicsuffix(domain, accept_unknown=False) is not None


def detect_uri(text: str, suffix_checker: SuffixChecker | None = None) -> str | None:
    """Return the first link in *text*, normalised, or ``None``.

    Parameters
    ----------
    text:
        Post body.
    suffix_checker:
        Validates bare domains.  Defaults to :class:`PublicSuffixChecker`.

    Returns
    -------
    str | None
        The link with ``https://`` added to bare domains and one trailing
        punctuation character removed, or ``None`` if the text has no
        link-like token at all.

    Raises
    ------
    SkyComposeUnknownDomainSuffixError
        If the first candidate is a bare domain whose suffix is unknown.
        Later candidates are never examined.
    """
    match = _URI_RE.search(text)
    if match is None:
        return None

    candidate = match.group(1)
    domain = match.group("domain")
    if domain is not None:
        checker = suffix_checker if suffix_checker is not None else PublicSuffixChecker()
        if not checker.is_known_suffix(domain):
            raise SkyComposeUnknownDomainSuffixError(
                message=f"Unknown domain suffix in {domain!r}",
                context={"domain": domain, "match": candidate},
            )
        uri = f"https://{candidate}"
    else:
        uri = candidate

    if _TRAILING_PUNCT_RE.search(uri) or (uri.endswith(")") and "(" not in uri):
        uri = uri[:-1]

    return uri
