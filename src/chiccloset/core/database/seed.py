"""Seed data for the mock database: demo shoppers and the catalogue."""

from chiccloset.core.database.models import Product, User


def _unsplash(photo_id: str) -> str:
    return f"https://images.unsplash.com/photo-{photo_id}?w=500&h=500&fit=crop"


def seed_users() -> list[User]:
    """Demo accounts usable from the login page."""
    return [
        User(id=1, email="demo@chiccloset.com", name="Fashion Lover", password="demo123"),
        User(id=2, email="jane@example.com", name="Jane Smith", password="password"),
    ]


def seed_products() -> list[Product]:
    """The ChicCloset catalogue."""
    return [
        Product(
            id=1,
            name="Floral Summer Dress",
            price=89.99,
            stock=15,
            category="Dresses",
            image=_unsplash("1572804013309-59a88b7e92f1"),
            description=(
                "Lightweight floral print dress perfect for summer days. Features "
                "adjustable straps and a flattering A-line silhouette."
            ),
            rating=4.7,
            reviews=234,
        ),
        Product(
            id=2,
            name="Classic Denim Jacket",
            price=129.99,
            stock=8,
            category="Jackets",
            image=_unsplash("1551028719-00167b16eac5"),
            description=(
                "Timeless denim jacket with distressed details. Versatile piece "
                "that pairs with any outfit."
            ),
            rating=4.8,
            reviews=567,
        ),
        Product(
            id=3,
            name="High-Waisted Skinny Jeans",
            price=79.99,
            stock=25,
            category="Bottoms",
            image=_unsplash("1541099649105-f69ad21f3246"),
            description=(
                "Comfortable stretch denim with a flattering high-waist fit. "
                "Available in multiple washes."
            ),
            rating=4.5,
            reviews=892,
        ),
        Product(
            id=4,
            name="Silk Blouse - Ivory",
            price=119.99,
            stock=12,
            category="Tops",
            image=_unsplash("1564257577-6049b8f0f7d1"),
            description=(
                "Luxurious 100% silk blouse with delicate button details. Perfect "
                "for work or evening wear."
            ),
            rating=4.6,
            reviews=312,
        ),
        Product(
            id=5,
            name="Maxi Wrap Dress",
            price=149.99,
            stock=10,
            category="Dresses",
            image=_unsplash("1595777457583-95e059d581b8"),
            description=(
                "Elegant wrap dress in flowing fabric. Features a tie waist and "
                "flattering V-neckline."
            ),
            rating=4.9,
            reviews=421,
        ),
        Product(
            id=6,
            name="Leather Ankle Boots",
            price=189.99,
            stock=6,
            category="Shoes",
            image=_unsplash("1543163521-1bf539c55dd2"),
            description=(
                "Premium leather ankle boots with block heel. Comfortable and "
                "stylish for all-day wear."
            ),
            rating=4.7,
            reviews=156,
        ),
        Product(
            id=7,
            name="Cashmere Sweater",
            price=199.99,
            stock=9,
            category="Tops",
            image=_unsplash("1434389677669-e08b4cac3105"),
            description=(
                "Soft 100% cashmere crewneck sweater. Available in multiple "
                "colors for layering."
            ),
            rating=4.8,
            reviews=289,
        ),
        Product(
            id=8,
            name="Wide-Leg Trousers",
            price=99.99,
            stock=18,
            category="Bottoms",
            image=_unsplash("1594633312681-425c7b97ccd1"),
            description=(
                "Tailored wide-leg trousers with pleated front. Professional and "
                "comfortable fit."
            ),
            rating=4.6,
            reviews=445,
        ),
    ]
