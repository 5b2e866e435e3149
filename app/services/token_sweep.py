"""Refresh-token sweep: delete expired or revoked refresh tokens."""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.services.tokens import delete_expired_tokens

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def run_token_sweep(session: Session, settings: "Settings") -> int:
    """
    Delete refresh tokens that are expired or revoked. Returns rows deleted.

    Idempotent and safe alongside request traffic: live tokens are never touched.
    """
    if not settings.TOKEN_SWEEP_ENABLED:
        logger.info("Token sweep is disabled (TOKEN_SWEEP_ENABLED=false); skipping.")
        return 0
    if not settings.REFRESH_TOKEN_STATEFUL:
        logger.info("Refresh tokens are stateless; nothing to sweep.")
        return 0

    cutoff = datetime.now(timezone.utc)
    deleted_count = delete_expired_tokens(session, now=cutoff)

    if deleted_count > 0:
        logger.info(
            "Token sweep: cutoff=%s, tokens_deleted=%s",
            cutoff.isoformat(),
            deleted_count,
        )
    return deleted_count
