"""Domain exception hierarchy."""


class DomainException(Exception):
    pass


class ImageIOError(DomainException):
    """The block source could not be read or is shorter than requested."""


class DecodeError(DomainException):
    pass


class TruncatedRecordError(DecodeError):
    pass


class NotSupportedError(DomainException):
    pass


class AssemblyError(DomainException):
    """A read failed partway through reassembling a file."""

    def __init__(self, destination: str, bytes_written: int, message: str) -> None:
        super().__init__(f"{destination}: {message} ({bytes_written} bytes written)")
        self.destination = destination
        self.bytes_written = bytes_written
