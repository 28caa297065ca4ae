"""Populate a fresh database with demo categories, products and accounts.

Idempotent: categories are matched by slug, products by name within their
category and users by email, so re-running only fills in what is missing.
"""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import suppress

from storefront.db import database, models
from storefront.db.repositories import users as user_repo
from storefront.utils.token_crypto import hash_password


logger = logging.getLogger("storefront.scripts.seed")

# Access SessionLocal dynamically so tests that rebind the sessionmaker are respected.
SessionLocal = lambda: database.SessionLocal()

TEST_USER_EMAIL = "test@example.com"
TEST_USER_PASSWORD = "password123"

CATEGORIES = [
    ("Clothing", "clothing"),
    ("Electronics", "electronics"),
    ("Bags", "bags"),
    ("Shoes", "shoes"),
    ("Accessories", "accessories"),
]

# (category slug, name, description, price, stock, image url)
PRODUCTS = [
    ("clothing", "Classic White Shirt", "A clean, comfortable white shirt for every day.", 59000, 50,
     "https://images.unsplash.com/photo-1621072156002-e2fccdc0b176?w=400"),
    ("clothing", "Denim Jacket", "A trend-proof denim jacket that goes with anything.", 89000, 30,
     "https://images.unsplash.com/photo-1551537482-f2075a1d41f2?w=400"),
    ("clothing", "Everyday T-Shirt", "Soft cotton basic tee for daily wear.", 29000, 100,
     "https://images.unsplash.com/photo-1521572163474-6864f9cf17ab?w=400"),
    ("electronics", "Bluetooth Headphones", "High-fidelity sound with active noise cancelling.", 199000, 25,
     "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?w=400"),
    ("electronics", "Smart Watch", "Health tracking and notifications on your wrist.", 299000, 15,
     "https://images.unsplash.com/photo-1523275335684-37898b6baf30?w=400"),
    ("electronics", "Wireless Charger", "Fast and safe wireless charging pad.", 45000, 40,
     "https://images.unsplash.com/photo-1586953208448-b95a79798f07?w=400"),
    ("bags", "Leather Backpack", "A practical backpack made from premium leather.", 159000, 20,
     "https://images.unsplash.com/photo-1553062407-98eeb64c6a62?w=400"),
    ("bags", "Canvas Tote", "Roomy canvas tote for everyday errands.", 69000, 35,
     "https://images.unsplash.com/photo-1553062407-98eeb64c6a62?w=400"),
    ("shoes", "Classic Sneakers", "Timeless sneakers balancing comfort and style.", 129000, 45,
     "https://images.unsplash.com/photo-1549298916-b41d501d3772?w=400"),
    ("shoes", "Running Shoes", "Cushioned, supportive shoes for serious runners.", 159000, 30,
     "https://images.unsplash.com/photo-1542291026-7eec264c27ff?w=400"),
    ("accessories", "Silver Necklace", "A simple, elegant silver necklace.", 79000, 25,
     "https://images.unsplash.com/photo-1515562141207-7a88fb7ce338?w=400"),
    ("accessories", "Sunglasses", "UV-blocking sunglasses with a modern frame.", 89000, 40,
     "https://images.unsplash.com/photo-1572635196237-14b3f281503f?w=400"),
]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the storefront database with demo data")
    parser.add_argument(
        "--admin-email",
        help="Also create (or promote) an admin account with this email",
    )
    parser.add_argument(
        "--admin-password",
        default="admin123",
        help="Password for a newly created admin account (default: admin123)",
    )
    parser.add_argument(
        "--skip-test-user",
        action="store_true",
        help=f"Do not create the {TEST_USER_EMAIL} demo account",
    )
    return parser.parse_args(argv)


def _ensure_user(session, *, email: str, password: str, name: str, phone: str | None, is_admin: bool) -> bool:
    existing = user_repo.get_user_by_email(session, email)
    if existing:
        if is_admin and not existing.is_admin:
            existing.is_admin = True
        return False
    session.add(
        models.User(
            email=user_repo.normalize_email(email),
            password_hash=hash_password(password),
            name=name,
            phone=phone,
            is_admin=is_admin,
        )
    )
    return True


def seed(*, admin_email: str | None = None, admin_password: str = "admin123", with_test_user: bool = True) -> dict:
    """Insert missing demo rows and return per-kind creation counts."""
    session = SessionLocal()
    created = {"categories": 0, "products": 0, "users": 0}
    try:
        by_slug = {}
        for name, slug in CATEGORIES:
            category = session.query(models.Category).filter(models.Category.slug == slug).first()
            if category is None:
                category = models.Category(name=name, slug=slug)
                session.add(category)
                session.flush()
                created["categories"] += 1
            by_slug[slug] = category

        for slug, name, description, price, stock, image_url in PRODUCTS:
            category = by_slug[slug]
            exists = (
                session.query(models.Product.id)
                .filter(models.Product.category_id == category.id, models.Product.name == name)
                .first()
            )
            if exists:
                continue
            session.add(
                models.Product(
                    name=name,
                    description=description,
                    price=price,
                    stock=stock,
                    image_url=image_url,
                    category_id=category.id,
                )
            )
            created["products"] += 1

        if with_test_user and _ensure_user(
            session,
            email=TEST_USER_EMAIL,
            password=TEST_USER_PASSWORD,
            name="Test User",
            phone="010-1234-5678",
            is_admin=False,
        ):
            created["users"] += 1
        if admin_email and _ensure_user(
            session,
            email=admin_email,
            password=admin_password,
            name="Administrator",
            phone=None,
            is_admin=True,
        ):
            created["users"] += 1

        session.commit()
        logger.info("Seed finished", extra=created)
        return created
    except Exception:
        session.rollback()
        raise
    finally:
        with suppress(Exception):
            session.close()


def main(argv: list[str] | None = None) -> int:
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)
    created = seed(
        admin_email=args.admin_email,
        admin_password=args.admin_password,
        with_test_user=not args.skip_test_user,
    )
    print(
        f"Created {created['categories']} categories, {created['products']} products "
        f"and {created['users']} users."
    )
    if not args.skip_test_user:
        print(f"Demo login: {TEST_USER_EMAIL} / {TEST_USER_PASSWORD}")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution path
    sys.exit(main())
