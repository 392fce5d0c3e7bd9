"""Match engine: evaluate a Query against a single line."""

from tailsift.query import Query


def matches(line: str, query: Query) -> bool:
    """
    Return True if the line passes the query.

    Plain substring containment on the lowercased line: any exclusion
    rejects the line, then every inclusion must be present. A term can
    match inside a larger word.

    Args:
        line: Line of text to test
        query: Parsed filter

    Returns:
        True if the line should be shown
    """
    lowered = line.lower()
    for term in query.negative_terms:
        if term in lowered:
            return False
    for term in query.positive_terms:
        if term not in lowered:
            return False
    return True
