"""Errors raised by the parts inventory."""


class ValidationError(ValueError):
    """A part draft is missing a required field or carries an invalid value."""

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        summary = "; ".join(f"{field}: {msg}" for field, msg in self.errors.items())
        super().__init__(summary or "invalid part draft")


class NotFoundError(LookupError):
    """No part with the requested id exists in the inventory."""

    def __init__(self, part_id: str) -> None:
        self.part_id = part_id
        super().__init__(f"part {part_id!r} not found")


class PersistenceUnavailable(RuntimeError):
    """The inventory snapshot could not be read or written."""
