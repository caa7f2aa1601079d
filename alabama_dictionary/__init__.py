"""Alabama/English dictionary search core."""

__version__ = "0.1.0"
