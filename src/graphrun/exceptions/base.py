from __future__ import annotations


class GraphRunError(Exception):
    """Base exception class for all graphrun-specific errors.

    This is the root of the graphrun exception hierarchy. All custom exceptions
    inherit from this class, which allows catching every engine error at the
    CLI boundary while letting system exceptions propagate naturally.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            await executor.execute()
        except GraphRunError as e:
            logger.error(f"Graph run failed: {e.message}")
            sys.exit(1)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the GraphRunError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
