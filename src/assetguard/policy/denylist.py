"""Policy constants: denylisted tokens and suspicious patterns.

These lists are matched literally. Changing them changes what the guard
accepts, so tests pin every entry.
"""

from __future__ import annotations

import re

# Substrings of the uppercased query. Order matters: the first hit is the
# one named in the rejection.
DANGEROUS_TOKENS: tuple[str, ...] = (
    # Data modification / privileges
    "DROP", "DELETE", "UPDATE", "INSERT", "ALTER", "CREATE",
    "TRUNCATE", "REPLACE", "GRANT", "REVOKE", "EXEC", "EXECUTE",
    # Set combination
    "UNION",
    # Comments and terminators
    "--", ";--", "/*", "*/",
    # Server variables
    "@@", "@",
    # String building
    "CHAR(", "NCHAR(", "VARCHAR(", "NVARCHAR(",
    # Timing / denial of service
    "WAITFOR", "DELAY", "BENCHMARK", "SLEEP",
    # File exfiltration
    "LOAD_FILE", "INTO OUTFILE", "INTO DUMPFILE",
)

# (pattern, what it indicates). Matched case-insensitively on the raw query.
SUSPICIOUS_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"'\s*OR\s+'1'\s*=\s*'1", re.IGNORECASE), "boolean injection: OR '1'='1'"),
    (re.compile(r"'\s*OR\s+1\s*=\s*1", re.IGNORECASE), "boolean injection: OR 1=1"),
    (re.compile(r"\bOR\s+'?1'?\s*=\s*'?1\b", re.IGNORECASE), "boolean injection: OR 1=1"),
    (re.compile(r"'\s*;\s*--", re.IGNORECASE), "comment-terminated statement"),
    (re.compile(r"INFORMATION_SCHEMA", re.IGNORECASE), "metadata schema access"),
    (re.compile(r"MYSQL\.", re.IGNORECASE), "system database access"),
    (re.compile(r"SYS\.", re.IGNORECASE), "system schema access"),
)
