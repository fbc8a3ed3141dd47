"""Top-level fault boundary.

Expected domain errors (``PharmaPitchError``) propagate to the caller. Anything
else is logged and the user picks how to recover: reload (state on disk is
kept, pending saves were flushed), or clear persisted state and reload.
"""

from __future__ import annotations

from enum import Enum
from typing import Awaitable, Callable, TypeVar

from pharma_pitch.config.logging import get_logger
from pharma_pitch.config.settings import Settings, get_settings
from pharma_pitch.exceptions import PharmaPitchError
from pharma_pitch.storage.persistence import PersistenceAdapter, create_persistence

from .workspace import Workspace, open_workspace

logger = get_logger(__name__)

T = TypeVar("T")


class RecoveryChoice(str, Enum):
    RELOAD = "reload"
    RESET = "reset"
    QUIT = "quit"


async def clear_persisted_state(persistence: PersistenceAdapter) -> None:
    """Delete stored collections everywhere; failures are logged, never raised."""
    try:
        if not await persistence.clear():
            logger.error("Failed to clear storage completely")
    except Exception as e:
        logger.error("Failed to clear storage: %s", e)


async def run_with_recovery(
    action: Callable[[Workspace], Awaitable[T]],
    choose: Callable[[BaseException], RecoveryChoice],
    settings: Settings | None = None,
    persistence_factory: Callable[[Settings], PersistenceAdapter] = create_persistence,
    max_attempts: int = 3,
) -> T:
    """Run ``action`` in a fresh workspace, recovering from unexpected faults.

    Raises the last fault when the user quits or ``max_attempts`` is reached.
    """
    settings = settings or get_settings()
    attempt = 0
    while True:
        attempt += 1
        persistence = persistence_factory(settings)
        try:
            async with open_workspace(settings, persistence) as ws:
                return await action(ws)
        except PharmaPitchError:
            raise
        except Exception as e:
            logger.exception("Uncaught error: %s", e)
            if attempt >= max_attempts:
                raise
            choice = choose(e)
            if choice is RecoveryChoice.QUIT:
                raise
            if choice is RecoveryChoice.RESET:
                await clear_persisted_state(persistence)
            logger.info("Reloading (attempt %d)", attempt + 1)
