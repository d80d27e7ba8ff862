"""Exceptions raised by the detection cell."""


class LoadError(Exception):
    """A model document could not be turned into templates and poses.

    Raised at configuration time; a detector is never built from a store that
    produced one.
    """

    def __init__(self, object_id, message: str):
        self.object_id = object_id
        super().__init__(f"{object_id}: {message}")


class InvariantViolation(RuntimeError):
    """A match references pose data the loader never stored."""
