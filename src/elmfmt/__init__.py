"""Editor integration shim for the elm-format binary."""

__version__ = "0.4.0"
