"""Seed demo stores, reviews and a pending submission.

Usage (from repository root):
    python backend/scripts/seed_demo.py

Usage (from backend directory):
    python scripts/seed_demo.py
    # or
    python -m scripts.seed_demo
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqlalchemy import delete, select

# Make `app` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from app.db.session import SessionLocal
from app.identity import ActingUser
from app.models.store import Store
from app.models.store_submission import StoreSubmission
from app.schemas.review import ReviewCreate
from app.schemas.submission import SubmissionCreate
from app.services.reviews import create_review
from app.services.submissions import create_submission

DEMO_USER_ID = "demo-user-001"
DEMO_PROPOSER_ID = "demo-proposer-001"


def build_demo_stores() -> list[Store]:
    """Return a deterministic set of directory stores."""

    rows = [
        ("Mangwon Market Tteokbokki", "Seoul Mapo-gu Poeun-ro 8-gil 14", "Mangwon Market", 37.5559, 126.9057, True, False, True),
        ("Tongin Dosirak Cafe", "Seoul Jongno-gu Jahamun-ro 15-gil 18", "Tongin Market", 37.5809, 126.9700, True, True, True),
        ("Namdaemun Kalguksu", "Seoul Jung-gu Namdaemunsijang 4-gil 42", "Namdaemun Market", 0.0, 0.0, False, False, True),
    ]
    return [
        Store(
            name=name,
            address=address,
            market_name=market_name,
            category="restaurant",
            lat=lat,
            lng=lng,
            card_available=card,
            mobile_available=mobile,
            paper_available=paper,
        )
        for name, address, market_name, lat, lng, card, mobile, paper in rows
    ]


def reset_demo_data(db) -> None:
    """Remove previously seeded demo rows."""

    names = [store.name for store in build_demo_stores()]
    db.execute(delete(Store).where(Store.name.in_(names)))
    db.execute(delete(StoreSubmission).where(StoreSubmission.user_id == DEMO_PROPOSER_ID))
    db.commit()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo directory data.")
    parser.add_argument("--no-reset", action="store_true", help="Keep existing demo rows.")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        if not args.no_reset:
            reset_demo_data(db)
        db.add_all(build_demo_stores())
        db.commit()

        first_store = db.scalar(select(Store).order_by(Store.id.asc()))
        if first_store is not None:
            create_review(
                db,
                ActingUser(user_id=DEMO_USER_ID),
                first_store.id,
                ReviewCreate(content="Paper vouchers accepted without fuss.", rating=5, voucher_type="paper"),
            )
        submission = create_submission(
            db,
            ActingUser(user_id=DEMO_PROPOSER_ID),
            SubmissionCreate(name="Gwangjang Bindaetteok", address="Seoul Jongno-gu Changgyeonggung-ro 88"),
        )
        print(f"Seeded demo stores and pending submission {submission.id}.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
