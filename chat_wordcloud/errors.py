"""Error types raised while loading uploads for the word cloud."""

from typing import Optional


class WordCloudError(Exception):
    """Base class for presentable upload failures.

    Every error carries the offending filename (when known) and a message
    suitable for showing to the user as-is.
    """

    def __init__(self, message: str, filename: Optional[str] = None):
        self.message = message
        self.filename = filename
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}: {self.message}"
        return self.message


class UnsupportedFormatError(WordCloudError, ValueError):
    """The file extension is neither .csv nor .json."""


class ParseError(WordCloudError, ValueError):
    """The file was read but its content could not be decoded."""


class ReadError(WordCloudError, OSError):
    """The underlying file could not be read."""


class FileTooLargeError(ReadError):
    """The upload exceeds the configured size limit."""
