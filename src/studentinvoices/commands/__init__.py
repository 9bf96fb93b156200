"""Sub-commands exposed through :mod:`studentinvoices.cli`."""

__all__ = ["generate", "inspect"]
