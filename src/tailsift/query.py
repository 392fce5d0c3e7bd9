"""
Query parsing for the filter text typed by the user.

Filter syntax:
- Terms are separated by single spaces; no quoting or escaping
- A term starting with "!" is an exclusion when at least
  MIN_EXCLUDE_LENGTH characters follow the "!"; shorter "!" terms are
  dropped entirely, not treated as inclusions
- Any other non-empty term is an inclusion
- Terms are case-insensitive (stored lowercased)
"""

from dataclasses import dataclass

# Characters required after "!" for an exclusion term. "!x" is dropped
# rather than excluding every line containing "x".
MIN_EXCLUDE_LENGTH = 2


@dataclass(frozen=True)
class Query:
    """
    Parsed filter: inclusion and exclusion substrings.

    Both term tuples hold lowercase, de-duplicated terms in the order
    they first appeared in the filter text.

    Attributes:
        positive_terms: Substrings a line must all contain
        negative_terms: Substrings a line must not contain
    """

    positive_terms: tuple[str, ...] = ()
    negative_terms: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        """Return True if the query accepts every line."""
        return not self.positive_terms and not self.negative_terms

    def to_filter_text(self) -> str:
        """
        Serialize back to filter text.

        Returns:
            Space-joined inclusions followed by "!"-prefixed exclusions
        """
        terms = list(self.positive_terms)
        terms.extend(f"!{term}" for term in self.negative_terms)
        return " ".join(terms)


def parse_query(raw: str) -> Query:
    """
    Parse raw filter text into a Query.

    Never fails; empty or whitespace-only text yields the empty query.

    Args:
        raw: Filter text as typed

    Returns:
        Query with lowercase positive and negative terms
    """
    positive: dict[str, None] = {}
    negative: dict[str, None] = {}

    for term in raw.strip().split(" "):
        term = term.strip()
        if not term:
            continue
        if term.startswith("!"):
            if len(term) - 1 >= MIN_EXCLUDE_LENGTH:
                negative[term[1:].lower()] = None
        else:
            positive[term.lower()] = None

    return Query(
        positive_terms=tuple(positive),
        negative_terms=tuple(negative),
    )
