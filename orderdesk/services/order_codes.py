# orderdesk/services/order_codes.py
import secrets
from datetime import datetime, timezone

# No 0/O or 1/I, codes get read over the phone
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_SUFFIX_LENGTH = 4


def generate_order_code(prefix: str, now: datetime | None = None) -> str:
    """
    Build a human-shareable order code: <PREFIX>-<YYMMDD>-<4 random chars>.

    Example:
        NMM-261018-K7QX

    Uniqueness is enforced by the orders.order_code constraint; the caller
    retries with a fresh code when an insert collides.
    """
    now = now or datetime.now(timezone.utc)
    suffix = "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_SUFFIX_LENGTH))
    return f"{prefix}-{now:%y%m%d}-{suffix}"
