"""Approve pending submissions that already have a directory store.

Usage (from backend directory):
    python scripts/reconcile_submissions.py
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from app.services.background_jobs import run_submission_reconciliation_job


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    reconciled = run_submission_reconciliation_job()
    print(f"Reconciled {len(reconciled)} submission(s): {reconciled}")


if __name__ == "__main__":
    main()
