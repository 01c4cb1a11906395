"""Sampling parameter sanitization for the Anthropic Messages API"""

import logging
import math
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def clamp_unit_interval(value: Optional[float]) -> Optional[float]:
    """Clamp a sampling parameter to [0, 1]; None and NaN become None"""
    if value is None:
        return None
    value = float(value)
    if math.isnan(value):
        return None
    return min(max(value, 0.0), 1.0)


def drop_conflicting_top_p(body: Dict[str, Any], request_id: str = "-") -> Dict[str, Any]:
    """Remove top_p when temperature is also set

    The upstream rejects requests carrying both. Returns a shallow copy.
    """
    sanitized = dict(body)
    if sanitized.get("temperature") is not None and sanitized.get("top_p") is not None:
        logger.warning(f"[{request_id}] Removing top_p (cannot be combined with temperature)")
        del sanitized["top_p"]
    return sanitized
