"""Helper modules for the ZATCA compliance console."""

__all__ = [
    "formatting",
    "forms",
    "qr",
]
