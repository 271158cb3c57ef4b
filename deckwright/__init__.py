"""deckwright: brief -> validated slide plan -> themed .pptx deck."""

__version__ = "0.1.0"
