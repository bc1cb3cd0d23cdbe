"""
Static localization tables for the cars domain (en / he).

Pure data plus two small lookups. Keys of ERROR_MESSAGES are ErrorKind values.
"""

from typing import Dict

DEFAULT_LANGUAGE = "en"
SUPPORTED_LANGUAGES = ("en", "he")

RECOMMENDATION_LABELS: Dict[str, Dict[str, str]] = {
    "en": {
        "Good deal": "Good deal",
        "Not recommended": "Not recommended",
        "Neutral – depends": "Neutral – depends",
    },
    "he": {
        "Good deal": "עסקה טובה",
        "Not recommended": "לא מומלץ",
        "Neutral – depends": "תלוי בהעדפות",
    },
}

ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "invalid_request": "Either yad2Url or carData must be provided",
        "unsupported_listing": "Only Yad2 URLs are supported",
        "challenge_detected": "CAPTCHA detected. Please try again later or use manual input.",
        "extraction_missing_fields": "Failed to extract required car details. Please try using manual input instead.",
        "extraction_failed": "Failed to scrape car data from Yad2. Please try using manual input instead.",
        "narration_failed": "Failed to evaluate car data",
        "internal_error": "Failed to process car evaluation",
    },
    "he": {
        "invalid_request": "נדרש קישור יד2 או פרטי רכב",
        "unsupported_listing": "רק קישורי יד2 נתמכים",
        "challenge_detected": "זוהתה בדיקת CAPTCHA. נסו שוב מאוחר יותר או הזינו את פרטי הרכב ידנית.",
        "extraction_missing_fields": "לא ניתן היה לחלץ את פרטי הרכב הנדרשים. נסו להזין את הפרטים ידנית.",
        "extraction_failed": "שליפת נתוני הרכב מיד2 נכשלה. נסו להזין את הפרטים ידנית.",
        "narration_failed": "שגיאה בהערכת הרכב",
        "internal_error": "עיבוד הערכת הרכב נכשל",
    },
}

UNABLE_TO_EVALUATE = {
    "en": "Unable to evaluate",
    "he": "לא ניתן להעריך",
}

REPORT_LABELS: Dict[str, Dict[str, str]] = {
    "en": {
        "heading": "Car Evaluation Results",
        "car_details": "Car Details",
        "title": "Title",
        "year": "Year",
        "mileage": "Mileage",
        "price": "Price",
        "ownership": "Ownership",
        "gearbox": "Gearbox",
        "engineType": "Engine Type",
        "evaluation": "Evaluation",
        "recommendation": "Recommendation",
        "score": "Score",
    },
    "he": {
        "heading": "תוצאות הערכת רכב",
        "car_details": "פרטי רכב",
        "title": "כותרת",
        "year": "שנה",
        "mileage": "קילומטראז'",
        "price": "מחיר",
        "ownership": "בעלות",
        "gearbox": "תיבת הילוכים",
        "engineType": "סוג מנוע",
        "evaluation": "הערכה",
        "recommendation": "המלצה",
        "score": "ציון",
    },
}


def normalize_language(language: str) -> str:
    language = (language or "").lower()
    return language if language in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def localize_recommendation(label: str, language: str) -> str:
    """Map a canonical English label to its display string; unknown labels pass through."""
    table = RECOMMENDATION_LABELS[normalize_language(language)]
    return table.get(label, label)


def error_message(kind: str, language: str) -> str:
    table = ERROR_MESSAGES[normalize_language(language)]
    return table.get(kind, table["internal_error"])

