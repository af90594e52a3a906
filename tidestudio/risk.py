"""risk.py — Pattern-based classification of destructive SQL.

Advisory only: the backend is the authority on what actually runs.
False positives are fine, misses are what matter.
"""

import re

_WORD_PATTERNS = [
    re.compile(r"\bDROP\b", re.IGNORECASE),
    re.compile(r"\bDELETE\b", re.IGNORECASE),
    re.compile(r"\bTRUNCATE\b", re.IGNORECASE),
    re.compile(r"\bALTER\b", re.IGNORECASE),
]

# Whole-table predicates. Matched per statement so that a WHERE 1=1 in a
# later SELECT is not attributed to an earlier UPDATE.
_CLAUSE_PATTERNS = [
    re.compile(r"\bUPDATE\b.*\bWHERE\s+1\s*=\s*1", re.IGNORECASE | re.DOTALL),
    re.compile(r"\bDELETE\b.*\bWHERE\s+1\s*=\s*1", re.IGNORECASE | re.DOTALL),
]


def split_statements(text):
    """Split SQL on ';' outside of quoted strings and identifiers."""
    statements = []
    current = []
    quote = None
    for ch in text:
        if quote:
            current.append(ch)
            if ch == quote:
                quote = None
        elif ch in ("'", '"', "`"):
            quote = ch
            current.append(ch)
        elif ch == ";":
            statements.append("".join(current))
            current = []
        else:
            current.append(ch)
    statements.append("".join(current))
    return [s for s in statements if s.strip()]


def classify(text):
    """Return True when the query looks destructive."""
    if not text:
        return False
    if not isinstance(text, str):
        text = str(text)
    if any(p.search(text) for p in _WORD_PATTERNS):
        return True
    for statement in split_statements(text):
        if any(p.search(statement) for p in _CLAUSE_PATTERNS):
            return True
    return False
