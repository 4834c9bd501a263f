"""Error taxonomy for stable module boundaries."""

from __future__ import annotations


class JinjaRandError(Exception):
    """Base exception for jinja-rand."""


class ArgumentParseError(JinjaRandError):
    """Raised when a template argument cannot be converted to the expected type."""

    def __init__(self, function: str, parameter: str, detail: str) -> None:
        super().__init__(f"Unable to parse argument for `{parameter}` in `{function}`: {detail}")
        self.function = function
        self.parameter = parameter


class MissingArgumentError(JinjaRandError):
    """Raised when a required template argument is absent."""

    def __init__(self, function: str, parameter: str) -> None:
        super().__init__(f"Required argument missing for parameter `{parameter}` in `{function}`")
        self.function = function
        self.parameter = parameter


class UnsupportedArgumentError(JinjaRandError):
    """Raised when an argument parses but names an unsupported option."""

    def __init__(self, parameter: str, argument: str) -> None:
        super().__init__(f"Unsupported argument `{argument}` for `{parameter}`")
        self.parameter = parameter
        self.argument = argument


class InvalidRangeError(JinjaRandError):
    """Raised when a lower bound is greater than its upper bound."""


class PrefixLengthOutOfBoundsError(JinjaRandError):
    """Raised when a CIDR prefix length bound lies outside the address width."""

    def __init__(self, provided: int, valid_start: int, valid_end: int) -> None:
        super().__init__(
            f"Provided cidr length {provided}, which is out of bounds. "
            f"Cidr length should be between {valid_start} and {valid_end}"
        )
        self.provided = provided
        self.valid_start = valid_start
        self.valid_end = valid_end


class FileAccessError(JinjaRandError):
    """Raised when a sample file or template cannot be opened or read."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Unable to read file at path `{path}`: {detail}")
        self.path = path


class EmptySampleFileError(JinjaRandError):
    """Raised when sampling from a file that has no lines."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Unable to sample from an empty file: `{path}`")
        self.path = path


class InternalInvariantError(JinjaRandError):
    """Raised when an internal invariant is violated; indicates a bug."""


class ConfigError(JinjaRandError):
    """Raised when configuration is invalid or missing."""


class RenderError(JinjaRandError):
    """Raised when a template cannot be compiled or rendered."""


class SchedulerError(JinjaRandError):
    """Raised for invalid schedule limits and duration parsing failures."""


class InvalidBatchArgumentsError(SchedulerError):
    """Raised when only one of batch size and batch interval is supplied."""

    def __init__(self) -> None:
        super().__init__(
            "Either both or neither of `batch_size` and `batch_interval` should be included. "
            "It is an error to include only one of the two."
        )
