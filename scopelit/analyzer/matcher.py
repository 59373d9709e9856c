"""Boundary-delimited identifier matching inside string literal text.

An identifier "occurs" in a literal when it appears as a whole word: the
characters on either side are boundaries (whitespace, punctuation or symbols)
or the literal's edge. Occurrences directly after ``%`` or ``\\`` are format
verbs and escape sequences (``%v``, ``\\n``), never identifiers.
"""
import unicodedata

# Never boundaries: they introduce format directives and escapes.
EXCLUDED_BOUNDARIES = frozenset('%\\')

# Latin-1 white space as Go's unicode.IsSpace sees it; beyond that, category Z*
LATIN1_SPACES = frozenset('\t\n\v\f\r \x85\xa0')


def is_boundary(char: str) -> bool:
    """Check whether a character may delimit a complete identifier.

    Args:
        char: A single character

    Returns:
        True for whitespace and for punctuation/symbol characters other
        than '%' and '\\'; False for letters, digits, marks and the rest
    """
    if char in EXCLUDED_BOUNDARIES:
        return False
    if char in LATIN1_SPACES:
        return True
    category = unicodedata.category(char)
    if char > '\xff' and category[0] == 'Z':
        return True
    # P* = punctuation, S* = symbols (math, currency, modifier, other)
    return category[0] in ('P', 'S')


def contains_identifier(literal: str, name: str) -> bool:
    """Return True if ``name`` occurs in ``literal`` as a real identifier use.

    Every substring position is tried. A candidate is rejected when the
    preceding character is '%' or '\\', or is not a boundary, or when the
    following character is not a boundary. Literal start and end satisfy
    their side automatically.

    Args:
        literal: String literal contents, delimiters already stripped
        name: Identifier to look for

    Returns:
        True on the first accepted position, False otherwise
    """
    if not name:
        return False

    size = len(name)
    pos = literal.find(name)
    while pos != -1:
        end = pos + size
        if pos > 0 and not is_boundary(literal[pos - 1]):
            # Also covers '%' and '\' since neither is a boundary
            pos = literal.find(name, pos + 1)
            continue
        if end < len(literal) and not is_boundary(literal[end]):
            pos = literal.find(name, pos + 1)
            continue
        return True
    return False
