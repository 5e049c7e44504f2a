from typing import Optional


class OfdError(RuntimeError):
    """Base class for every error raised while reading an OFD document."""


class ContainerError(OfdError):
    """The archive cannot be opened or a required entry is missing."""


class StructuralDecodeError(OfdError):
    """An XML entry is malformed or does not match the expected shape."""

    def __init__(self, message: str, entry: Optional[str] = None):
        if entry:
            message = f"{entry}: {message}"
        super().__init__(message)
        self.entry = entry


class MicroLanguageError(OfdError, ValueError):
    """A positional or path attribute value could not be decoded."""


class InvalidFormatError(MicroLanguageError):
    pass


class FloatParseError(MicroLanguageError):
    def __init__(self, token: str):
        super().__init__(f"Invalid numeral: {token!r}")
        self.token = token
