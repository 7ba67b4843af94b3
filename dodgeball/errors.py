class DodgeballError(Exception):
    """Base class of every error raised by this package."""


class ParseError(DodgeballError):
    """Raised when an input document cannot be turned into scenario requests.

    Args:
        message (str): Human readable description
        token (str, optional): The offending token or value
        position (int, optional): 0-based position of the token in the token stream
        field (str, optional): The JSON field that failed
        index (int, optional): The index of the offending JSON entry (case or player)
    """

    def __init__(self, message: str, *, token=None, position=None, field=None, index=None):
        super().__init__(message)
        self.token = token
        self.position = position
        self.field = field
        self.index = index


class BadCountError(ParseError):
    pass


class BadCoordinateError(ParseError):
    pass


class BadDirectionError(ParseError):
    pass


class BadStartIndexError(ParseError):
    pass


class MissingFieldError(ParseError):
    pass


class UnexpectedEndError(ParseError):
    pass


class UnknownDirection(BadDirectionError):
    def __init__(self, token, position=None):
        super().__init__(f"Unknown direction: {token!r}", token=token, position=position)


class TransportError(DodgeballError):
    """Raised when a remote call fails (network, deadline, remote status, bad method path).

    Args:
        message (str): Human readable description
        code (grpc.StatusCode, optional): Status code of the failed call
        details (str, optional): Details reported by the remote side
    """

    def __init__(self, message: str, *, code=None, details=None):
        super().__init__(message)
        self.code = code
        self.details = details


class CodecError(DodgeballError):
    """Raised when a wire message cannot be encoded or decoded."""
