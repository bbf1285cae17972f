# ila_beauty/config/content.py

# Static storefront copy served by /api/public/home.
# Categories and products come from the store; everything here is editorial.

HERO = {
    "eyebrow": "New Collection",
    "title": "Discover Your Natural Beauty Glow",
    "subtitle": (
        "Luxurious skincare products made with premium ingredients "
        "to help you achieve your best skin ever."
    ),
    "primary_cta": {"label": "Shop Now", "link": "/shop"},
    "secondary_cta": {"label": "Learn More", "link": "/about"},
    "image": "/placeholder.svg",
}

ABOUT = {
    "title": "Clean Beauty for a Radiant You",
    "paragraphs": [
        "We believe skincare should be effective, sustainable, and a moment of "
        "self-care in your day. Our products are formulated with clean, premium "
        "ingredients that deliver real results.",
        "Founded in 2020, our mission is to create skincare that works in harmony "
        "with your skin's natural processes, not against them. Each product is "
        "dermatologist-tested and made without harmful chemicals.",
    ],
    "stats": [
        {"value": "100%", "label": "Cruelty-Free Products"},
        {"value": "50+", "label": "Natural Ingredients"},
        {"value": "15K+", "label": "Happy Customers"},
    ],
    "image": "/placeholder.svg",
}

NEWSLETTER = {
    "title": "Subscribe to Our Newsletter",
    "subtitle": (
        "Subscribe to receive updates on new product launches, seasonal "
        "promotions, and skincare tips from our experts."
    ),
}
