"""Domain exceptions."""


class QueueConfigurationError(Exception):
    """Raised when an event queue cannot be built from its arguments.

    Covers a defaults mapping that is not a mapping or holds non-callable
    handlers, and a target object that cannot take the queue methods.
    """

    def __init__(self, message: str, target: object = None) -> None:
        """Initialize.

        Args:
            message: Error message.
            target: The rejected target object, if the target was the problem.
        """
        self.target = target
        super().__init__(message)
