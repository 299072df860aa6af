"""Exception classes for the note pipeline."""


class NoteDrawError(Exception):
    """Base pipeline exception."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(NoteDrawError):
    """Input rejected before any external call."""

    pass


class OrganizerError(NoteDrawError):
    """Text model call failed or its output could not be used."""

    pass


class StateTransitionError(NoteDrawError):
    """Illegal unit status transition."""

    def __init__(self, unit_id: str, current: str, target: str):
        self.unit_id = unit_id
        self.current = current
        self.target = target
        super().__init__(f"Unit {unit_id} cannot move from {current} to {target}")


class InsufficientCreditsError(NoteDrawError):
    """Credit ledger refused an image generation."""

    def __init__(self, message: str = "Insufficient credits"):
        super().__init__(message)
