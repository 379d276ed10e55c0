from datetime import datetime
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def parse_datetime_field(field_value: Optional[str]) -> Optional[datetime]:
    """
    Parse an RFC 3339 timestamp from a Drive API response.

    Args:
        field_value: Timestamp string such as ``2025-01-15T10:00:00.000Z``

    Returns:
        Timezone aware datetime or None if parsing fails
    """
    if not field_value:
        return None

    try:
        return datetime.fromisoformat(field_value.replace("Z", "+00:00"))
    except (ValueError, TypeError) as e:
        logger.warning("Failed to parse datetime %r: %s", field_value, e)
        return None
