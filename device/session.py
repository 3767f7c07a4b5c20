"""Session Bootstrap - Open the game client with an injected auth token."""

import time
import logging
from datetime import datetime, timedelta, timezone

import config
from game_profile import GameProfile

logger = logging.getLogger(__name__)

GAME_READY_MARKERS = ["MAP", "HOME", "PLAY", "BATTLE", "PROFILE"]
HOME_READY_MARKERS = ["MAP", "PROFILE"]


def _wait_for_markers(observer, markers: list[str], timeout: int) -> int | None:
    """Poll once per second until any marker is visible.

    Returns the number of seconds waited, or None on timeout.
    """
    for second in range(timeout):
        if observer.is_game_ready(markers):
            return second + 1
        time.sleep(1)
    return None


def bootstrap_session(controller, observer, token: str,
                      profile: GameProfile | None = None) -> None:
    """Load the client, inject ``token`` and land on the home screen.

    The token is opaque here. A client that never shows a ready marker is
    logged and the session continues; navigation errors propagate.

    Args:
        controller: BrowserController with an open page.
        observer: Perception used to poll for ready markers.
        token: Auth token string.
        profile: GameProfile (defaults when None).
    """
    profile = profile or GameProfile()

    controller.goto(profile.base_url)
    time.sleep(1)

    expires = (
        datetime.now(timezone.utc) + timedelta(days=config.AUTH_TOKEN_TTL_DAYS)
    ).isoformat()
    key = controller.inject_token(
        token, profile.auth_storage_prefix, profile.auth_storage_key, expires
    )
    logger.debug(f"Auth token stored under '{key}'")
    controller.reload()

    waited = _wait_for_markers(observer, GAME_READY_MARKERS, config.GAME_READY_TIMEOUT)
    if waited is None:
        logger.warning("Game not detected, continuing anyway")
    else:
        logger.info(f"Game loaded in {waited}s")

    controller.goto(profile.home_url)
    if _wait_for_markers(observer, HOME_READY_MARKERS, config.HOME_READY_TIMEOUT) is None:
        logger.warning("Home screen markers not seen")

    logger.info("Browser launched and authenticated")
