"""Controllers coordinating gallery state with the album store."""

from .selection_controller import SelectionController

__all__ = ["SelectionController"]
