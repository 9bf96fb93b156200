"""Generate personalised PDF invoices for students listed in an Excel roster.

The pipeline reads the roster (:mod:`studentinvoices.students`), draws a
charge per student (:mod:`studentinvoices.billing`) and lays out one PDF per
student with an embedded QR code (:mod:`studentinvoices.document`).
:func:`studentinvoices.batch.run_batch` ties the stages together.
"""

__version__ = "0.1.0"

__all__ = [
    "batch",
    "billing",
    "cli",
    "commands",
    "config",
    "document",
    "logging",
    "students",
    "verification",
]
