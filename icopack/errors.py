"""Exceptions raised while building an icon."""


class IconError(Exception):
    """Base class for every conversion failure."""


class FormatSpecError(IconError, ValueError):
    def __init__(self, token: str, message: str):
        super().__init__(f"{message}: '{token}'")
        self.token = token


class MalformedFormatSpec(FormatSpecError):
    def __init__(self, token: str):
        super().__init__(token, "Unknown format")


class NonSquareFormat(FormatSpecError):
    def __init__(self, token: str):
        super().__init__(token, "Format is not square")


class UnsupportedDimension(FormatSpecError):
    def __init__(self, token: str):
        super().__init__(token, "Unsupported dimension")


class UnsupportedBitDepth(FormatSpecError):
    def __init__(self, token: str):
        super().__init__(token, "Unsupported bit depth")


class SourceNotFound(IconError, FileNotFoundError):
    def __init__(self, path):
        super().__init__(f"Input file not found: {path}")
        self.path = path


class InvalidTargetState(IconError):
    """Output path exists and the caller did not agree to replace it."""

    def __init__(self, path, message: str = "Output file already exists"):
        super().__init__(f"{message}: {path}")
        self.path = path


class InternalInvariantViolation(IconError, RuntimeError):
    pass


class UnreadableSource(IconError):
    def __init__(self, path, reason):
        super().__init__(f"Cannot read image {path}: {reason}")
        self.path = path
