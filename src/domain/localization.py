"""
Regional language tables and localized formatting.

Static lookups keyed by ISO 639 language code.  Region names follow the
``state`` field returned by OpenStreetMap reverse geocoding.
"""

from __future__ import annotations

from datetime import datetime
from typing import NamedTuple

from .entities import WorkingHours


class Language(NamedTuple):
    code: str
    name: str


INDIAN_LANGUAGES: dict[str, Language] = {
    "hindi": Language("hi", "हिंदी"),
    "bengali": Language("bn", "বাংলা"),
    "telugu": Language("te", "తెలుగు"),
    "marathi": Language("mr", "मराठी"),
    "tamil": Language("ta", "தமிழ்"),
    "gujarati": Language("gu", "ગુજરાતી"),
    "urdu": Language("ur", "اردو"),
    "kannada": Language("kn", "ಕನ್ನಡ"),
    "odia": Language("or", "ଓଡ଼ିଆ"),
    "malayalam": Language("ml", "മലയാളം"),
    "punjabi": Language("pa", "ਪੰਜਾਬੀ"),
    "assamese": Language("as", "অসমীয়া"),
    "maithili": Language("mai", "मैथिली"),
    "santali": Language("sat", "ᱥᱟᱱᱛᱟᱲᱤ"),
    "nepali": Language("ne", "नेपाली"),
    "konkani": Language("kok", "कोंकणी"),
    "dogri": Language("doi", "डोगरी"),
    "manipuri": Language("mni", "ꯃꯤꯇꯩꯂꯣꯟ"),
    "bodo": Language("brx", "बड़ो"),
    "sanskrit": Language("sa", "संस्कृतम्"),
    "sindhi": Language("sd", "سنڌي"),
    "english": Language("en", "English"),
}

LANGUAGE_CODES = frozenset(lang.code for lang in INDIAN_LANGUAGES.values())

DEFAULT_REGION_LANGUAGES = ("hi", "en")

REGION_LANGUAGES: dict[str, tuple[str, ...]] = {
    "Andhra Pradesh": ("te", "en"),
    "Arunachal Pradesh": ("en", "hi"),
    "Assam": ("as", "bn", "en"),
    "Bihar": ("hi", "mai", "en"),
    "Chhattisgarh": ("hi", "en"),
    "Goa": ("kok", "mr", "en"),
    "Gujarat": ("gu", "en"),
    "Haryana": ("hi", "en"),
    "Himachal Pradesh": ("hi", "en"),
    "Jharkhand": ("hi", "en"),
    "Karnataka": ("kn", "en"),
    "Kerala": ("ml", "en"),
    "Madhya Pradesh": ("hi", "en"),
    "Maharashtra": ("mr", "en"),
    "Manipur": ("mni", "en"),
    "Meghalaya": ("en",),
    "Mizoram": ("en",),
    "Nagaland": ("en",),
    "Odisha": ("or", "en"),
    "Punjab": ("pa", "en"),
    "Rajasthan": ("hi", "en"),
    "Sikkim": ("ne", "en"),
    "Tamil Nadu": ("ta", "en"),
    "Telangana": ("te", "en"),
    "Tripura": ("bn", "en"),
    "Uttar Pradesh": ("hi", "ur", "en"),
    "Uttarakhand": ("hi", "en"),
    "West Bengal": ("bn", "en"),
    "Delhi": ("hi", "en"),
    "Jammu and Kashmir": ("ur", "doi", "en"),
    "Ladakh": ("ur", "doi", "en"),
    "Puducherry": ("ta", "fr", "en"),
    "Andaman and Nicobar Islands": ("hi", "en"),
    "Chandigarh": ("pa", "hi", "en"),
    "Dadra and Nagar Haveli and Daman and Diu": ("gu", "mr", "en"),
    "Lakshadweep": ("ml", "en"),
}

# Sunday first, matching WorkingHours.days (0 = Sunday)
DAY_NAMES: dict[str, tuple[str, ...]] = {
    "en": ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"),
    "hi": ("रविवार", "सोमवार", "मंगलवार", "बुधवार", "गुरुवार", "शुक्रवार", "शनिवार"),
    "bn": ("রবিবার", "সোমবার", "মঙ্গলবার", "বুধবার", "বৃহস্পতিবার", "শুক্রবার", "শনিবার"),
    "te": ("ఆదివారం", "సోమవారం", "మంగళవారం", "బుధవారం", "గురువారం", "శుక్రవారం", "శనివారం"),
    "mr": ("रविवार", "सोमवार", "मंगळवार", "बुधवार", "गुरुवार", "शुक्रवार", "शनिवार"),
    "ta": ("ஞாயிறு", "திங்கள்", "செவ்வாய்", "புதன்", "வியாழன்", "வெள்ளி", "சனி"),
    "gu": ("રવિવાર", "સોમવાર", "મંગળવાર", "બુધવાર", "ગુરુવાર", "શુક્રવાર", "શનિવાર"),
    "kn": ("ಭಾನುವಾರ", "ಸೋಮವಾರ", "ಮಂಗಳವಾರ", "ಬುಧವಾರ", "ಗುರುವಾರ", "ಶುಕ್ರವಾರ", "ಶನಿವಾರ"),
    "ml": ("ഞായറാഴ്ച", "തിങ്കളാഴ്ച", "ചൊവ്വാഴ്ച", "ബുധനാഴ്ച", "വ്യാഴാഴ്ച", "വെള്ളിയാഴ്ച", "ശനിയാഴ്ച"),
    "pa": ("ਐਤਵਾਰ", "ਸੋਮਵਾਰ", "ਮੰਗਲਵਾਰ", "ਬੁੱਧਵਾਰ", "ਵੀਰਵਾਰ", "ਸ਼ੁੱਕਰਵਾਰ", "ਸ਼ਨੀਵਾਰ"),
}

DELIVERY_INSTRUCTIONS: dict[str, dict[str, str]] = {
    "en": {
        "leaveAtDoor": "Leave at door",
        "callBeforeDelivery": "Call before delivery",
        "deliverToReception": "Deliver to reception",
        "handToRecipient": "Hand to recipient only",
    },
    "hi": {
        "leaveAtDoor": "दरवाजे पर छोड़ दें",
        "callBeforeDelivery": "डिलीवरी से पहले कॉल करें",
        "deliverToReception": "रिसेप्शन पर डिलीवर करें",
        "handToRecipient": "केवल प्राप्तकर्ता को दें",
    },
    "bn": {
        "leaveAtDoor": "দরজায় রেখে যান",
        "callBeforeDelivery": "ডেলিভারির আগে কল করুন",
        "deliverToReception": "রিসেপশনে ডেলিভার করুন",
        "handToRecipient": "শুধুমাত্র প্রাপককে দিন",
    },
}

UNKNOWN_LOCATION = {"en": "Unknown Location", "hi": "अज्ञात स्थान"}


def languages_for_region(region: str | None) -> list[str]:
    return list(REGION_LANGUAGES.get(region or "", DEFAULT_REGION_LANGUAGES))


def format_working_hours(hours: WorkingHours, language: str = "en") -> str:
    """``"Monday, Tuesday: 09:00 - 18:00"`` with day names in *language*."""
    names = DAY_NAMES.get(language, DAY_NAMES["en"])
    days = ", ".join(names[day] for day in hours.days)
    return f"{days}: {hours.start} - {hours.end}"


def format_delivery_instructions(key: str, language: str = "en") -> str:
    return DELIVERY_INSTRUCTIONS.get(language, {}).get(key, key)


def is_within_business_hours(hours: WorkingHours, local_now: datetime) -> bool:
    """*local_now* must already be in the seller's time zone."""
    # isoweekday: Monday=1 .. Sunday=7
    weekday = local_now.isoweekday() % 7
    if weekday not in hours.days:
        return False
    minute_of_day = local_now.hour * 60 + local_now.minute
    return hours.start_minutes <= minute_of_day <= hours.end_minutes
