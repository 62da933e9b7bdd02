"""Exception types shared by the bot's registries and background services"""


class GremlinError(Exception):
    """Base class for errors raised by gremlinbot"""


class ParseError(GremlinError):
    """User input could not be parsed"""


class InvalidDurationError(ParseError):
    def __init__(self, token: str, reason: str | None = None):
        message = f"Invalid duration: {token!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.token = token
        self.reason = reason


class InvalidTargetError(ParseError):
    """Ban target cannot be turned into a store key"""

    def __init__(self, target: str, reason: str):
        super().__init__(f"Invalid ban target {target!r}: {reason}")
        self.target = target
        self.reason = reason


class StoreError(GremlinError):
    """Read, write or delete against the external store failed"""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class SourceFetchError(GremlinError):
    """A feed source was unreachable or returned something unusable"""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


class AlreadyJoinedError(GremlinError):
    def __init__(self, actor_id: str):
        super().__init__(f"{actor_id} has already joined")
        self.actor_id = actor_id
