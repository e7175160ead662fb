"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 6 sample sellers (Mumbai and Bengaluru, one suspended)
  - 4 sample subscriptions (seller trials, one renewed, one buyer trial)
"""

import asyncio

from sqlalchemy import text

from src.domain.enums import (
    BusinessType,
    DocumentType,
    SellerStatus,
    SubscriptionType,
    VerificationStatus,
)
from src.infrastructure.database import async_session_factory, engine
from src.services.sellers import SellerService
from src.services.subscriptions import SubscriptionService, monthly_price


def _seller(name, owner, email, city, state, pincode, lat, lng, **extra):
    return {
        "business_name": name,
        "owner_name": owner,
        "email": email,
        "phone": extra.pop("phone", "+919800000000"),
        "business_type": extra.pop("business_type", BusinessType.INDIVIDUAL),
        "address": {
            "street": extra.pop("street", "Main Road"),
            "city": city,
            "state": state,
            "country": "India",
            "pincode": pincode,
            "coordinates": {"latitude": lat, "longitude": lng},
        },
        "documents": extra.pop(
            "documents",
            [{"document_type": DocumentType.AADHAR, "number": "123412341234"}],
        ),
        "preferences": {
            "languages": extra.pop("languages", ["hi", "en"]),
            "negotiation_enabled": extra.pop("negotiation_enabled", True),
            "delivery_options": {
                "local_delivery": True,
                "pickup": True,
                "cod": True,
                "free_delivery_radius_km": extra.pop("free_radius", 5.0),
            },
            "working_hours": {
                "start": extra.pop("start", "09:00"),
                "end": extra.pop("end", "21:00"),
                "days": extra.pop("days", [1, 2, 3, 4, 5, 6]),
            },
        },
    }


SELLERS = [
    _seller(
        "Sharma Kirana Store", "Ramesh Sharma", "ramesh@example.com",
        "Mumbai", "Maharashtra", "400053", 19.1197, 72.8468,
        languages=["mr", "hi", "en"],
    ),
    _seller(
        "Patel Fresh Vegetables", "Kavita Patel", "kavita@example.com",
        "Mumbai", "Maharashtra", "400058", 19.1230, 72.8400,
        languages=["gu", "hi"], free_radius=3.0, start="06:00", end="13:00",
    ),
    _seller(
        "Andheri Electronics", "Imran Shaikh", "imran@example.com",
        "Mumbai", "Maharashtra", "400069", 19.1136, 72.8697,
        business_type=BusinessType.REGISTERED,
        documents=[
            {"document_type": DocumentType.GSTIN, "number": "27AABCU9603R1ZM"},
            {"document_type": DocumentType.PAN, "number": "AABCU9603R"},
        ],
        negotiation_enabled=False,
    ),
    _seller(
        "Bandra Bakehouse", "Maria Fernandes", "maria@example.com",
        "Mumbai", "Maharashtra", "400050", 19.0596, 72.8295,
        days=[0, 1, 2, 3, 4, 5, 6], start="07:00", end="22:00",
    ),
    _seller(
        "Malleshwaram Flower Mart", "Lakshmi Rao", "lakshmi@example.com",
        "Bengaluru", "Karnataka", "560003", 13.0035, 77.5709,
        languages=["kn", "ta", "en"],
    ),
    _seller(
        "Indiranagar Handicrafts", "Suresh Gowda", "suresh@example.com",
        "Bengaluru", "Karnataka", "560038", 12.9784, 77.6408,
        languages=["kn", "en"],
    ),
]


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM sellers"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Sellers ───────────────────────────────────────────────────
        sellers = SellerService(session)
        created = [await sellers.register_seller(payload) for payload in SELLERS]
        await sellers.verify_seller(created[2].id, VerificationStatus.VERIFIED)
        await sellers.update_seller_status(
            created[5].id, SellerStatus.SUSPENDED, "Documents under review"
        )
        for product_id in ("rice-5kg", "atta-10kg", "toor-dal-1kg"):
            await sellers.add_product(created[0].id, product_id)
        await sellers.add_review(created[0].id, "buyer-1", 5, "Always fresh stock")
        await sellers.add_review(created[0].id, "buyer-2", 4, None)
        print(f"  Created {len(created)} sellers")

        # ── Subscriptions ─────────────────────────────────────────────
        subscriptions = SubscriptionService(session)
        for seller in created[:3]:
            await subscriptions.create_subscription(
                f"seller-{seller.id}", SubscriptionType.SELLER
            )
        await subscriptions.renew_subscription(
            f"seller-{created[2].id}",
            SubscriptionType.SELLER,
            monthly_price(SubscriptionType.SELLER),
            "seed-txn-0001",
        )
        await subscriptions.create_subscription("buyer-1", SubscriptionType.BUYER)
        print("  Created 4 subscriptions")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
