#!/usr/bin/env python3
"""Run ``student-invoices generate`` from a checkout that is not installed.

Defaults match the original batch job: ``Students.xlsx`` in the current
folder, invoices written into ``results/``.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Without ``pip install .`` Python does not see the ``src`` folder.
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
_SRC_PATH = _PROJECT_ROOT / "src"
if str(_SRC_PATH) not in sys.path:
    sys.path.insert(0, str(_SRC_PATH))

from studentinvoices.commands.generate import main

if __name__ == "__main__":  # pragma: no cover - direct execution
    raise SystemExit(main())
