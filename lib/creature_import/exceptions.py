# creature_import/exceptions.py


class StatblockError(ValueError):
    """Base class for statblocks that cannot be imported at all."""


class StructuralError(StatblockError):
    """Fewer than four non-empty lines: no room for name, type line and stats."""


class AnchorNotFoundError(StatblockError):
    """No type line (native) or AC stats line (OSE) could be located."""
