"""Ban target normalization"""

from enum import Enum

from .errors import InvalidTargetError

DEVICE_PREFIX = "dev_"

# characters the realtime database refuses in keys; "/" would also nest paths
RESERVED_KEY_CHARS = frozenset("/#$[]")


class BanCategory(str, Enum):
    ADDRESS = "address"
    DEVICE = "device"


def _check_key(raw: str, key: str) -> str:
    for char in key:
        if char in RESERVED_KEY_CHARS:
            raise InvalidTargetError(raw, f"{char!r} is not allowed")
        if char == ".":
            raise InvalidTargetError(raw, "'.' is not allowed in device ids")
        if ord(char) < 32 or ord(char) == 127:
            raise InvalidTargetError(raw, "control characters are not allowed")
    return key


def normalize_target(raw: str) -> tuple[BanCategory, str]:
    """Map a raw ban target to its category and storage-safe key.

    Device tokens pass through unchanged. Anything else is treated as a
    network address; dots are not allowed in store keys so they become
    underscores (``1.2.3.4`` -> ``1_2_3_4``). Targets that would still not
    be a single plain key (``1.2.3.4/24``, ``dev_a/b``) raise
    InvalidTargetError instead of being written somewhere unexpected.
    """
    if not raw or not raw.strip():
        raise InvalidTargetError(raw, "target must not be empty")

    if raw.startswith(DEVICE_PREFIX):
        return BanCategory.DEVICE, _check_key(raw, raw)
    return BanCategory.ADDRESS, _check_key(raw, raw.replace(".", "_"))
