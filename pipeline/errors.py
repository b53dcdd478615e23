class SplitError(Exception):
    def __init__(self, message: str, stage: str = "split", path: str | None = None):
        self.message = message
        self.stage = stage
        self.path = path
        location = f" [{path}]" if path else ""
        super().__init__(f"{stage}: {message}{location}")


class InvalidConfigError(SplitError):
    pass


class DecodeError(SplitError):
    pass


class UnsupportedFormatError(SplitError):
    pass


class SplitIOError(SplitError):
    pass


class HeaderOverflowError(SplitError):
    pass
