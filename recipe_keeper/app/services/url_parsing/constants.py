"""Vocabulary and defaults shared by the extraction pipeline."""

from typing import Tuple

DEFAULT_TITLE = "New Recipe"
DEFAULT_CATEGORY = "general"
DEFAULT_SOURCE = "unknown"
PLACEHOLDER_IMAGE = "/placeholder.svg"

# Section title that is flattened without a "<title>:" header line.
DEFAULT_SECTION_TITLE = "Ingredients"
PAN_SIZE_SECTION_TITLE = "Pan size"

# Ordered: the first matching category wins.
CATEGORY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("cakes", ("עוגה", "עוגות", "עוגת", "טורט", "cake", "torte")),
    ("cookies", ("עוגיות", "עוגיה", "ביסקוטי", "cookie", "biscotti", "biscuit")),
    ("breads", ("לחם", "חלה", "בייגל", "פיתה", "bread", "challah", "bagel", "focaccia")),
    ("desserts", ("קינוח", "מוס", "פודינג", "קרם", "dessert", "mousse", "pudding")),
    ("sweets", ("שוקולד", "ממתק", "פרלין", "טראפל", "chocolate", "candy", "praline", "truffle")),
    ("pastries", ("מאפה", "בורקס", "פשטידה", "קיש", "pastry", "pastries", "bourekas", "quiche")),
    ("meals", ("ארוחה", "תבשיל", "מרק", "פסטה", "אורז", "סלט", "dinner", "stew", "soup", "pasta")),
    ("salads", ("סלט", "ירקות", "salad", "vegetables")),
)

# Marker phrases are matched case-insensitively.
INGREDIENTS_MARKERS = ("ingredients:", "מצרכים:")
PREPARATION_STEPS_MARKERS = ("preparation steps", "שלבי הכנה", "אופן ההכנה")
HOW_TO_PREPARE_MARKERS = ("how to prepare", "how to make", "איך מכינים", "אופן ההכנה", "אופן הכנה")
PREPARATION_HEADING_MARKERS = (
    "preparation",
    "instructions",
    "directions",
    "method",
    "how to prepare",
    "הוראות הכנה",
    "אופן ההכנה",
    "אופן הכנה",
    "איך מכינים",
)
DESCRIPTION_SPLIT_MARKERS = (
    "preparation method:",
    "preparation:",
    "instructions:",
    "method:",
    "directions:",
    "אופן ההכנה:",
    "אופן הכנה:",
    "הוראות הכנה:",
)

# Header vocabulary for unstructured ingredient sections.
DEFAULT_SECTION_HEADERS = ("מצרכים", "ingredients")
NAMED_SECTION_HEADERS = (
    "למשרה",
    "לבסיס",
    "לרוטב",
    "לציפוי",
    "למילוי",
    "לקישוט",
    "for the base",
    "for the sauce",
    "for the topping",
    "for the filling",
    "for the garnish",
)
SECTION_HEADER_MAX_LENGTH = 30

BOILERPLATE_PHRASES = (
    "הכנתם?",
    "made this recipe?",
    "made it?",
    "share your photo",
    "עמוד הבית",
    "קטגוריות",
    "תפריט",
    "חפש",
)

VIDEO_LINK_DOMAINS = ("youtube.com", "youtu.be", "tiktok.com", "instagram.com", "facebook.com/watch")

# Short-video caption vocabulary.
CAPTION_INGREDIENT_MARKERS = ("ingredients", "materials", "מצרכים", "חומרים", "רכיבים")
CAPTION_INSTRUCTION_MARKERS = (
    "preparation",
    "instructions",
    "directions",
    "method",
    "אופן הכנה",
    "אופן ההכנה",
    "הוראות הכנה",
    "הכנה:",
)
CAPTION_MARKER_MAX_LENGTH = 40

PLATFORM_TITLE_SUFFIXES = ("YouTube", "TikTok", "Instagram", "Facebook", "Pinterest")
