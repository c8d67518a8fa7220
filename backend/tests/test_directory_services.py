"""Service-level tests for store listings, reviews, likes and favorites."""

from __future__ import annotations

import unittest

from pydantic import ValidationError
from sqlalchemy import create_engine, delete
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.identity import ActingUser
from app.models.base import Base
from app.models.closure_report import ClosureReport
from app.models.favorite import Favorite
from app.models.review import Review
from app.models.review_like import ReviewLike
from app.models.store import Store
from app.schemas.review import ReviewCreate
from app.services.errors import DuplicateVote, PermissionDenied, RecordNotFound
from app.services.favorites import add_favorite, is_favorite, list_favorites, remove_favorite
from app.services.reviews import (
    create_review,
    delete_review,
    get_review_likes,
    like_review,
    list_reviews_by_user,
    list_reviews_for_store,
    unlike_review,
)
from app.services.stores import get_directory_overview, get_store_detail, list_stores, list_stores_in_bounds

ALICE = ActingUser(user_id="alice")
BOB = ActingUser(user_id="bob")
ADMIN = ActingUser(user_id="admin", is_admin=True)


class DirectoryServiceTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls) -> None:
        Base.metadata.drop_all(cls.engine)
        cls.engine.dispose()

    def setUp(self) -> None:
        self.db: Session = self.SessionLocal()
        self._reset_tables()
        self.mangwon = self._store("Mangwon Tteokbokki", "Seoul Mapo-gu Poeun-ro 8", 37.55, 126.90, paper=True)
        self.tongin = self._store("Tongin Dosirak", "Seoul Jongno-gu Jahamun-ro 15", 37.58, 126.97, card=True)
        self.busan = self._store("Gukje Eomuk", "Busan Jung-gu Sinchang-ro 2", 0.0, 0.0, paper=True, mobile=True)

    def tearDown(self) -> None:
        self.db.close()

    def test_list_stores_filters_and_paginates(self) -> None:
        page = list_stores(self.db)
        self.assertEqual(page.total, 3)
        self.assertEqual([item.id for item in page.items], [self.busan.id, self.tongin.id, self.mangwon.id])

        by_region = list_stores(self.db, region="Seoul")
        self.assertEqual({item.id for item in by_region.items}, {self.mangwon.id, self.tongin.id})
        self.assertEqual(list_stores(self.db, region="all").total, 3)

        search = list_stores(self.db, query="dosirak")
        self.assertEqual([item.id for item in search.items], [self.tongin.id])

        paper = list_stores(self.db, paper=True, mobile=True)
        self.assertEqual([item.id for item in paper.items], [self.busan.id])

        by_name = list_stores(self.db, sort="name", per_page=2, page=2)
        self.assertEqual(by_name.total_pages, 2)
        self.assertEqual([item.name for item in by_name.items], ["Tongin Dosirak"])

        with self.assertRaises(ValueError):
            list_stores(self.db, per_page=0)

    def test_list_stores_aggregates_review_stats(self) -> None:
        create_review(self.db, ALICE, self.tongin.id, ReviewCreate(content="Card accepted", rating=5))
        create_review(
            self.db,
            BOB,
            self.tongin.id,
            ReviewCreate(content="Refused paper", rating=2, is_available=False, voucher_type="paper"),
        )
        create_review(self.db, BOB, self.busan.id, ReviewCreate(content="Fine", rating=4))

        page = list_stores(self.db, sort="reviews")

        self.assertEqual(page.items[0].id, self.tongin.id)
        top = page.items[0]
        self.assertEqual(top.review_count, 2)
        self.assertAlmostEqual(top.avg_rating, 3.5)
        self.assertEqual(top.available_percent, 50)
        untouched = next(item for item in page.items if item.id == self.mangwon.id)
        self.assertEqual(untouched.review_count, 0)
        self.assertIsNone(untouched.available_percent)

    def test_map_bounds_exclude_ungeocoded_stores(self) -> None:
        inside = list_stores_in_bounds(self.db, sw_lat=37.5, sw_lng=126.8, ne_lat=37.6, ne_lng=127.0)
        self.assertEqual({store.id for store in inside}, {self.mangwon.id, self.tongin.id})

        around_origin = list_stores_in_bounds(self.db, sw_lat=-1.0, sw_lng=-1.0, ne_lat=1.0, ne_lng=1.0)
        self.assertEqual(around_origin, [])

    def test_store_detail_combines_reviews_reports_and_favorite(self) -> None:
        create_review(self.db, ALICE, self.mangwon.id, ReviewCreate(content="Great", rating=5, min_amount=10000))
        create_review(self.db, BOB, self.mangwon.id, ReviewCreate(content="Okay", rating=4))
        add_favorite(self.db, ALICE, self.mangwon.id)

        detail = get_store_detail(self.db, self.mangwon.id, ALICE.user_id)

        self.assertEqual(detail.store.name, "Mangwon Tteokbokki")
        self.assertEqual(detail.review_count, 2)
        self.assertAlmostEqual(detail.average_rating, 4.5)
        self.assertEqual(detail.available_percent, 100)
        self.assertEqual(detail.reviews[0].content, "Okay")
        self.assertEqual(detail.reviews[1].min_amount, 10000)
        self.assertEqual(detail.reports.tier, "none")
        self.assertTrue(detail.favorited)
        self.assertFalse(get_store_detail(self.db, self.mangwon.id).favorited)
        with self.assertRaises(RecordNotFound):
            get_store_detail(self.db, 9999)

    def test_overview_counts_and_recent_reviews(self) -> None:
        create_review(self.db, ALICE, self.mangwon.id, ReviewCreate(content="First", rating=5))
        create_review(self.db, ALICE, self.tongin.id, ReviewCreate(content="Second", rating=3))

        overview = get_directory_overview(self.db)

        self.assertEqual(overview.store_count, 3)
        self.assertEqual(overview.review_count, 2)
        self.assertEqual([item.content for item in overview.recent_reviews], ["Second", "First"])
        self.assertEqual(overview.recent_reviews[0].store_name, "Tongin Dosirak")

    def test_review_validation_and_ownership(self) -> None:
        with self.assertRaises(ValidationError):
            ReviewCreate(content="Too good", rating=6)
        with self.assertRaises(RecordNotFound):
            create_review(self.db, ALICE, 9999, ReviewCreate(content="Nowhere", rating=3))

        review = create_review(self.db, ALICE, self.mangwon.id, ReviewCreate(content="Mine", rating=4))
        self.assertEqual(review.min_amount, 0)
        with self.assertRaises(PermissionDenied):
            delete_review(self.db, BOB, review.id)

        delete_review(self.db, ALICE, review.id)
        self.assertEqual(list_reviews_for_store(self.db, self.mangwon.id), [])

        other = create_review(self.db, BOB, self.mangwon.id, ReviewCreate(content="Spam", rating=1))
        delete_review(self.db, ADMIN, other.id)
        with self.assertRaises(RecordNotFound):
            delete_review(self.db, ADMIN, other.id)

    def test_reviews_by_user_include_store_names(self) -> None:
        create_review(self.db, ALICE, self.mangwon.id, ReviewCreate(content="A", rating=4))
        create_review(self.db, BOB, self.tongin.id, ReviewCreate(content="B", rating=4))

        mine = list_reviews_by_user(self.db, ALICE)

        self.assertEqual([(item.content, item.store_name) for item in mine], [("A", "Mangwon Tteokbokki")])

    def test_likes_are_one_per_user(self) -> None:
        first = create_review(self.db, ALICE, self.mangwon.id, ReviewCreate(content="Liked", rating=5))
        second = create_review(self.db, ALICE, self.mangwon.id, ReviewCreate(content="Ignored", rating=3))

        self.assertEqual(like_review(self.db, BOB, first.id).like_count, 1)
        with self.assertRaises(DuplicateVote):
            like_review(self.db, BOB, first.id)
        like_review(self.db, ALICE, first.id)

        likes = get_review_likes(self.db, [first.id, second.id], BOB.user_id)
        self.assertEqual(likes.like_counts, {first.id: 2})
        self.assertEqual(likes.liked_review_ids, [first.id])

        self.assertEqual(unlike_review(self.db, BOB, first.id).like_count, 1)
        self.assertEqual(unlike_review(self.db, BOB, first.id).like_count, 1)
        self.assertEqual(get_review_likes(self.db, []).like_counts, {})

    def test_favorites_are_idempotent(self) -> None:
        add_favorite(self.db, ALICE, self.mangwon.id)
        add_favorite(self.db, ALICE, self.mangwon.id)
        add_favorite(self.db, ALICE, self.tongin.id)

        favorites = list_favorites(self.db, ALICE)
        self.assertEqual([item.store_id for item in favorites], [self.tongin.id, self.mangwon.id])
        self.assertEqual(favorites[1].store.name, "Mangwon Tteokbokki")

        remove_favorite(self.db, ALICE, self.mangwon.id)
        remove_favorite(self.db, ALICE, self.mangwon.id)
        self.assertFalse(is_favorite(self.db, ALICE.user_id, self.mangwon.id))
        with self.assertRaises(RecordNotFound):
            add_favorite(self.db, ALICE, 9999)

    def _store(
        self,
        name: str,
        address: str,
        lat: float,
        lng: float,
        *,
        paper: bool = False,
        card: bool = False,
        mobile: bool = False,
    ) -> Store:
        store = Store(
            name=name,
            address=address,
            lat=lat,
            lng=lng,
            paper_available=paper,
            card_available=card,
            mobile_available=mobile,
        )
        self.db.add(store)
        self.db.commit()
        self.db.refresh(store)
        return store

    def _reset_tables(self) -> None:
        self.db.execute(delete(ReviewLike))
        self.db.execute(delete(Review))
        self.db.execute(delete(Favorite))
        self.db.execute(delete(ClosureReport))
        self.db.execute(delete(Store))
        self.db.commit()


if __name__ == "__main__":
    unittest.main()
