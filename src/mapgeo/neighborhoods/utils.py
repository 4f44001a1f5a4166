"""
utils.py

Logging helper for the assembler: a neighborhood that cannot be clipped is
dropped and reported, and the rest of the batch carries on.

- `log_dropped_neighborhood(neighborhood_id, name, exc, **ctx)`
"""

from typing import Any
import sys
import logging

logger = logging.getLogger(__name__)


def log_dropped_neighborhood(neighborhood_id: str, name: str, exc: Exception, **ctx: Any) -> None:
    """Report a neighborhood dropped because of ``exc``.

    The record goes through `logger.exception` with any extra ``ctx`` pairs
    appended. A broken logging setup must not abort assembly, so failures
    there fall back to one line on `sys.stderr`.
    """
    label = f'{neighborhood_id} ({name})' if name else str(neighborhood_id)
    extra = ''.join(f' {k}={v!r}' for k, v in ctx.items())
    try:
        logger.exception('dropping neighborhood %s: %s%s', label, exc, extra)
    except Exception:
        try:
            sys.stderr.write(f'LOGGING FAILURE: dropping neighborhood {label}: {exc}\n')
        except Exception:
            # stderr closed
            pass
