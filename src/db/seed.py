# demo catalog written into a fresh database (see STOREFRONT_SEED_DEMO_DATA)

DEMO_CATEGORIES = ["Hoodies", "Shirts", "Track Pants", "Trouser"]

DEMO_PRODUCTS = [
    {
        "name": "Classic Pullover Hoodie",
        "price": 4500.0,
        "category": "Hoodies",
        "sizes": ["S", "M", "L", "XL"],
        "stock": 25,
        "description": "Heavyweight fleece hoodie with a kangaroo pocket.",
        "images": [],
        "featured": "best-selling",
    },
    {
        "name": "Zip-Up Hoodie",
        "price": 5200.0,
        "category": "Hoodies",
        "sizes": ["M", "L", "XL", "XXL"],
        "stock": 12,
        "description": "Full-zip hoodie, brushed inside.",
        "images": [],
        "featured": "trending-now",
    },
    {
        "name": "Oversized Sweat Shirt",
        "price": 3800.0,
        "category": "Shirts",
        "sizes": ["S", "M", "L"],
        "stock": 30,
        "description": "Drop-shoulder crew neck sweatshirt.",
        "images": [],
        "featured": "trending-now",
    },
    {
        "name": "Essential Tee",
        "price": 1800.0,
        "category": "Shirts",
        "sizes": ["S", "M", "L", "XL"],
        "stock": 60,
        "description": "Cotton jersey t-shirt.",
        "images": [],
        "featured": "best-selling",
    },
    {
        "name": "Tapered Track Pants",
        "price": 3500.0,
        "category": "Track Pants",
        "sizes": ["S", "M", "L", "XL"],
        "stock": 18,
        "description": "Slim track pants with zipped pockets.",
        "images": [],
        "featured": "none",
    },
    {
        "name": "Pleated Trouser",
        "price": 4200.0,
        "category": "Trouser",
        "sizes": ["M", "L"],
        "stock": 0,
        "description": "Relaxed fit pleated trouser.",
        "images": [],
        "featured": "none",
    },
]
