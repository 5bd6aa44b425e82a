import logging
import os

logger = logging.getLogger(__name__)


def _canon_prefix(val):
    """
    Normalize API prefix to always be exactly like '/api':
      - defaults to '/api' when unset/empty
      - ensures a single leading slash
      - removes any trailing slash (except for root)
    """
    val = (val or "/api").strip()
    if not val.startswith("/"):
        val = "/" + val
    if len(val) > 1 and val.endswith("/"):
        val = val[:-1]
    return val


def _parse_positive_int(env_var: str, default: int) -> int:
    raw_value = os.getenv(env_var)
    if raw_value is None or not raw_value.strip():
        return default

    try:
        value = int(raw_value)
    except ValueError:
        logger.warning(
            "%s is not a valid integer (got %r); defaulting to %d",
            env_var,
            raw_value,
            default,
        )
        return default

    if value < 1:
        logger.warning("%s must be at least 1; defaulting to %d", env_var, default)
        return default

    return value


def _parse_origins(raw: str | None) -> list[str]:
    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    # Credentials + wildcard origins is unsafe
    if "*" in origins:
        raise ValueError(
            "ALLOWED_ORIGINS cannot include '*' (wildcard). Specify explicit, trusted origins."
        )
    return origins


API_PREFIX = _canon_prefix(os.getenv("API_PREFIX"))

MAX_PLAYERS = _parse_positive_int("BOWLING_MAX_PLAYERS", 4)
MAX_GAMES = _parse_positive_int("BOWLING_MAX_GAMES", 1000)

ALLOWED_ORIGINS = _parse_origins(os.getenv("ALLOWED_ORIGINS"))
ALLOW_CREDENTIALS = os.getenv("ALLOW_CREDENTIALS", "true").lower() == "true"
