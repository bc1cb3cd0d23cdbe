# Yad2 listing layout. Each chain is tried in order, first usable match wins.
CONTENT_CONTAINER = ".feeditem-ld"

LISTING_SELECTORS = {
    "title": [
        ".feeditem-ld h1",
        ".feeditem-ld .title",
        ".feeditem-ld .feeditem-title",
    ],
    "price": [
        ".feeditem-ld .price",
        ".feeditem-ld .feeditem-price",
        '.feeditem-ld [data-test-id="price"]',
    ],
    "year": [
        ".feeditem-ld .year",
        '.feeditem-ld [data-test-id="year"]',
    ],
    "mileage": [
        ".feeditem-ld .mileage",
        '.feeditem-ld [data-test-id="mileage"]',
        ".feeditem-ld .feeditem-mileage",
    ],
    "ownership": [
        ".feeditem-ld .ownership",
        '.feeditem-ld [data-test-id="ownership"]',
    ],
    "gearbox": [
        ".feeditem-ld .gearbox",
        '.feeditem-ld [data-test-id="gearbox"]',
    ],
    "engine_type": [
        ".feeditem-ld .engine-type",
        '.feeditem-ld [data-test-id="engine-type"]',
    ],
}

# Text shown by Yad2's anti-automation interstitial
CHALLENGE_PHRASES = [
    "אנו מניחים שגולשים כאן בני אנוש",
]

# Domain-specific configuration for 'cars'
domain_config = {
    "extraction": {
        "container": CONTENT_CONTAINER,
        "selectors": LISTING_SELECTORS,
        "challenge_phrases": CHALLENGE_PHRASES,
    },
    "guardrails": {
        "required_fields": ["title", "price", "year"],
        "max_mileage": 1_000_000,
        "max_price": 10_000_000,
    },
}
