"""Custom exceptions for compression jobs.

This module provides specific exception types for the compression pipeline,
enabling the controller to turn each failure into a single user-facing
message while keeping cancellation out of the error path.
"""


class CompressionError(Exception):
    """Base exception for compression failures.

    All failures surfaced by the controller inherit from this class, allowing
    callers to catch them with a single except clause if desired.
    """

    @property
    def user_message(self) -> str:
        """Message shown to the user for this failure."""
        return str(self)


class ToolUnavailableError(CompressionError):
    """Raised when the ffmpeg executable cannot be located.

    Attributes:
        tool_name: Name of the missing tool.
    """

    def __init__(self, tool_name: str = "ffmpeg", hint: str | None = None) -> None:
        """Initialize the exception.

        Args:
            tool_name: Name of the missing tool.
            hint: Optional install hint appended to the message.
        """
        self.tool_name = tool_name
        self.hint = hint
        message = f"{'FFmpeg' if tool_name == 'ffmpeg' else tool_name} not found"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)


class LaunchFailureError(CompressionError):
    """Raised when the encoder process could not be started."""

    def __init__(self, executable: str, reason: str) -> None:
        self.executable = executable
        self.reason = reason
        super().__init__(f"Could not start {executable}: {reason}")


class NonZeroExitError(CompressionError):
    """Raised when the encoder exits with a non-zero status.

    Attributes:
        exit_code: The process exit status.
        stderr_tail: Last lines the encoder wrote to stderr.
    """

    def __init__(self, exit_code: int, stderr_tail: list[str] | None = None) -> None:
        """Initialize the exception.

        Args:
            exit_code: The process exit status.
            stderr_tail: Last lines of encoder diagnostics, for logging.
        """
        self.exit_code = exit_code
        self.stderr_tail = stderr_tail or []
        super().__init__(f"FFmpeg exited with code {exit_code}")


class MissingOutputError(CompressionError):
    """Raised when the encoder reported success but wrote no output file."""

    def __init__(self, output_path: object) -> None:
        self.output_path = output_path
        super().__init__("Output file was not created")


class ConcurrentCompressionError(CompressionError):
    """Raised when compress() is called while another run is still active.

    This is a caller error: the controller permits one run at a time and
    does not queue requests.
    """

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "A compression is already running")


class EncodeCancelled(Exception):
    """Signals that an encode stopped because it was cancelled.

    Not a CompressionError. Cancellation never populates the user-visible
    error field.
    """

    def __init__(self, pass_description: str = "encode") -> None:
        self.pass_description = pass_description
        super().__init__(f"{pass_description} cancelled")
