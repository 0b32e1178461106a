"""
MySQL table definition parser

Recovers each column's clause from SHOW CREATE TABLE output, exactly as the
server renders it. SHOW FULL COLUMNS loses DEFAULT and COMMENT formatting,
so a lossless MODIFY COLUMN has to reuse this text instead.
"""

import logging
import re
from typing import Dict

logger = logging.getLogger(__name__)

COLUMN_LINE_PATTERN = re.compile(r'^`([^`]+)`\s+(.*)$')


def parse_column_clauses(definition_text: str) -> Dict[str, str]:
    """
    Map column names to their verbatim definition clause.

    Args:
        definition_text: Full CREATE TABLE text as returned by the server

    Returns:
        Ordered dict of column name -> clause (type, NULL/NOT NULL, DEFAULT,
        COMMENT, ...). Index and constraint lines are skipped. An empty dict
        means the text could not be parsed, not that the table has no columns.
    """
    if not definition_text:
        return {}

    start = definition_text.find('(')
    end = definition_text.rfind(')')
    if start == -1 or end == -1 or end <= start:
        logger.debug("Table definition has no enclosing parentheses")
        return {}

    body = definition_text[start + 1:end]

    columns = {}
    for line in re.split(r'\r?\n', body):
        line = line.strip()
        if not line.startswith('`'):
            continue

        if line.endswith(','):
            line = line[:-1]

        match = COLUMN_LINE_PATTERN.match(line)
        if not match:
            continue

        name, clause = match.group(1), match.group(2).strip()
        if clause:
            columns[name] = clause

    return columns
