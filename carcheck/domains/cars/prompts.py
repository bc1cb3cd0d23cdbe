import json

from carcheck.domains.cars.schemas import VehicleAttributes

SYSTEM_PROMPTS = {
    "en": (
        "You are a senior car evaluation expert with extensive knowledge of the automotive market "
        "and a reputation for providing comprehensive and reliable analyses. "
        "Your goal is to provide the user with an in-depth, well-reasoned, and holistic evaluation "
        "of whether a used car is worth buying. "
        "Your response must be in JSON format only and include 'evaluation', 'recommendation', and 'score' fields. "
        "Provide a thorough analysis of all car details, including pros, cons, market value considerations, "
        "common issues for the specific model/year, and how each parameter influences the overall assessment. "
        "Explain in clear language why the car is recommended or not recommended."
    ),
    "he": (
        "אתה מומחה בכיר להערכת רכבים, בעל ידע נרחב בשוק הרכב ומוניטין של מתן ניתוחים מקיפים ואמינים. "
        "המטרה שלך היא לספק למשתמש הערכה מעמיקה, מנומקת היטב, ומקיפה לגבי האם כדאי לרכוש רכב משומש. "
        "התשובה שלך חייבת להיות בפורמט JSON בלבד ולכלול את השדות evaluation, recommendation, ו-score. "
        "ספק ניתוח מעמיק של כל פרטי הרכב, כולל יתרונות, חסרונות, התייחסות לערך שוק, "
        "בעיות נפוצות לדגם/שנה, וכיצד כל פרמטר משפיע על ההערכה הכוללת. "
        "הסבר בשפה ברורה מדוע הרכב מומלץ או לא מומלץ."
    ),
}

USER_PROMPTS = {
    "en": """
Analyze the following car details and provide an in-depth evaluation:
{car_json}

Carefully consider all provided parameters. Construct a detailed explanation that outlines specific pros and cons for this car, based on your expert experience and general knowledge about the car's model and year.

Return a JSON object with the following fields:
- "recommendation": A clear recommendation, one of "Good deal", "Not recommended", or "Neutral – depends"
- "evaluation": A detailed explanation for your recommendation, including pros, cons and important considerations for the buyer.
- "score": A numerical score from 0 to 100 that aligns with your recommendation and analysis.
""",
    "he": """
נתח את פרטי הרכב הבאים ותן הערכה מעמיקה:
{car_json}

שקול את כל הפרמטרים שניתנו בזהירות. בנה הסבר מפורט שמציין יתרונות וחסרונות ספציפיים לרכב זה, בהתבסס על ניסיונך כמומחה ועל ידע כללי לגבי דגם ושנתון הרכב.

החזר אובייקט JSON עם השדות הבאים:
- "recommendation": המלצה ברורה אחת מבין "עסקה טובה", "לא מומלץ", או "תלוי בהעדפות"
- "evaluation": הסבר מפורט להמלצתך, כולל יתרונות, חסרונות ודגשים חשובים לקונה.
- "score": ציון מספרי מ-0 עד 100 התואם את המלצתך והניתוח שלך.
""",
}


def serialize_car_data(car_data: VehicleAttributes) -> str:
    return json.dumps(car_data.to_wire(), ensure_ascii=False, indent=2)


def create_prompt(car_data: VehicleAttributes, language: str = "en") -> list[dict]:
    """
    Creates the chat prompt for evaluating a used car.
    """
    lang = language if language in SYSTEM_PROMPTS else "en"
    return [
        {"role": "system", "content": SYSTEM_PROMPTS[lang]},
        {"role": "user", "content": USER_PROMPTS[lang].format(car_json=serialize_car_data(car_data))},
    ]
