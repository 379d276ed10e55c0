"""
Log sanitization utilities to keep file names and ids out of logs.

Database file names often identify their owner, so values embedded in Drive
queries and file names are reduced to a shape description before logging.
"""

import re

# A single-quoted query literal, honouring backslash escapes
_QUOTED_LITERAL = re.compile(r"'((?:[^'\\]|\\.)*)'")


def sanitize_query(query: str, max_length: int = 60) -> str:
    """
    Sanitize a Drive search query for logging by masking its literal values.

    Args:
        query: Drive query string to sanitize
        max_length: Maximum length to show

    Returns:
        Sanitized query representation

    Example:
        "name contains 'pwsafe.kdbx'" -> "'name contains '[11 chars]'' (27 chars)"
    """
    if not query:
        return "[empty-query]"

    sanitized = _QUOTED_LITERAL.sub(lambda match: f"'[{len(match.group(1))} chars]'", query)

    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "..."

    return f"'{sanitized}' ({len(query)} chars)"


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename for logging.

    Args:
        filename: Filename to sanitize

    Returns:
        Sanitized filename representation
    """
    if not filename:
        return "[no-filename]"

    # Show only extension and length for privacy
    parts = filename.split('.')
    if len(parts) > 1:
        extension = parts[-1].lower()
        return f"[file.{extension}] ({len(filename)} chars)"
    else:
        return f"[file] ({len(filename)} chars)"


def sanitize_file_id(file_id: str) -> str:
    """
    Sanitize Drive file id for logging.

    Args:
        file_id: File id to sanitize

    Returns:
        Sanitized file id representation
    """
    if not file_id:
        return "[no-file-id]"

    # Show only first 6 and last 4 characters
    if len(file_id) <= 12:
        return f"[file-id: {file_id}]"
    else:
        return f"[file-id: {file_id[:6]}...{file_id[-4:]}]"


def sanitize_for_logging(**kwargs) -> dict:
    """
    Sanitize multiple fields for logging in one call.

    Args:
        **kwargs: Fields to sanitize (query, file_name, file_id, etc.)

    Returns:
        Dictionary with sanitized values
    """
    sanitized = {}

    for key, value in kwargs.items():
        if key == 'query':
            sanitized[key] = sanitize_query(value) if value else None
        elif key in ('file_name', 'name'):
            sanitized[key] = sanitize_filename(value)
        elif key in ('file_id', 'parent_id'):
            sanitized[key] = sanitize_file_id(value) if value else None
        else:
            # Other fields carry no user data
            sanitized[key] = value

    return sanitized
