"""Shared constants across the engine"""


class ProviderConstants:
    """Provider identifiers, ordering and scoring constants"""

    PONS = "pons"
    LINGUATOOLS = "linguatools"
    GROQ = "groq"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"
    FALLBACK = "fallback"

    # Fixed priority order used by the orchestrator
    PRIORITY = (PONS, LINGUATOOLS, GROQ, OPENAI, ANTHROPIC, OLLAMA)

    # Per-provider score bonus
    SOURCE_PREFERENCE_BONUS: dict[str, float] = {
        PONS: 0.2,
        LINGUATOOLS: 0.1,
    }

    # Confidence assigned when the provider reports none
    DICTIONARY_CONFIDENCE = 1.0
    GENERATIVE_CONFIDENCE = 0.6
    FALLBACK_CONFIDENCE = 0.3

    ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
    ANTHROPIC_VERSION = "2023-06-01"
    GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"


class ScoringConstants:
    """Weights and penalties for candidate scoring"""

    CONFIDENCE_WEIGHT = 0.4
    FREQUENCY_WEIGHT = 0.3
    FREQUENCY_SCALE = 1000
    MISSING_ARTICLE_PENALTY = 0.3
    MISSING_TRANSLATION_PENALTY = 0.2
    MISSING_EXAMPLE_PENALTY = 0.1
    MIN_TRANSLATION_LENGTH = 2
    MIN_EXAMPLE_LENGTH = 10
    VALID_ARTICLES = frozenset(["der", "die", "das"])


class TextConstants:
    """Constants for text processing"""

    MIN_WORD_LENGTH = 1
    MAX_WORD_LENGTH = 100

    WHITESPACE_PATTERN = r"\s+"
    HTML_TAG_PATTERN = r"<[^>]*>"
    ARTICLE_PATTERN = r"\b(der|die|das)\b"
    PRONUNCIATION_PATTERN = r"\[([^\]]+)\]"
    GRAMMAR_PATTERN = r"\{([^}]+)\}"
    JSON_OBJECT_PATTERN = r"\{[\s\S]*\}"

    # Any Unicode letters, single separators between them
    VALID_WORD_PATTERN = r"^[^\W\d_]+(?:[\s\-'][^\W\d_]+)*$"

    ARTICLES = ("der", "die", "das")
    TOKEN_STRIP_CHARS = ",;:.!?()\"'"


class LevelConstants:
    """Curated keywords and thresholds for CEFR level guessing"""

    LEVEL_KEYWORDS: dict[str, frozenset[str]] = {
        "A1": frozenset(
            [
                "der", "die", "das", "und", "oder", "aber", "ist", "sind",
                "haben", "sein", "ich", "du", "er", "sie", "es", "wir", "ihr",
                "mit", "von", "zu", "in", "auf", "haus", "auto", "buch",
                "wasser", "brot", "zeit", "tag", "jahr", "mann", "frau",
                "machen", "gehen", "kommen", "sehen", "hören", "sagen",
                "essen", "trinken",
            ]
        ),
        "A2": frozenset(
            [
                "wohnung", "familie", "freund", "arbeit", "schule", "urlaub",
                "wetter", "gesund", "problem", "leben", "sprechen",
                "verstehen", "kaufen", "verkaufen", "fahren", "arbeiten",
                "lernen", "studieren", "wohnen", "besuchen", "helfen", "fragen",
            ]
        ),
        "B1": frozenset(
            [
                "gesellschaft", "politik", "wirtschaft", "umwelt", "kultur",
                "bildung", "erfahrung", "entwicklung", "möglichkeit",
                "entscheiden", "diskutieren", "organisieren", "planen",
            ]
        ),
    }

    UMLAUT_PATTERN = r"[äöü]"
    ESZETT = "ß"
    COMPOUND_PATTERN = r"[A-Z][a-z]+[A-Z]"
    COMPLEX_SUFFIX_PATTERN = r"(ung|heit|keit|schaft|tion|ismus)$"

    # (max length, max complexity score, level), checked in order
    THRESHOLDS = (
        (6, 0, "A1"),
        (8, 1, "A2"),
        (10, 2, "B1"),
        (12, 3, "B2"),
    )
    DEFAULT_LEVEL = "C1"


class CategoryConstants:
    """Category keyword table; first matching category wins"""

    DEFAULT_CATEGORY = "general"

    CATEGORIES: dict[str, tuple[str, ...]] = {
        "food": (
            "essen", "trinken", "brot", "wasser", "milch", "saft", "apfel",
            "käse", "fleisch", "food", "eat", "drink", "bread", "water",
            "milk", "juice", "apple", "cheese", "meat",
        ),
        "family": (
            "familie", "mutter", "vater", "kind", "bruder", "schwester",
            "family", "mother", "father", "child", "brother", "sister",
        ),
        "housing": (
            "haus", "wohnung", "zimmer", "fenster", "tür", "küche", "house",
            "apartment", "room", "window", "door", "kitchen", "home",
        ),
        "transport": (
            "auto", "zug", "bus", "flugzeug", "fahrrad", "bahnhof", "car",
            "train", "plane", "bicycle", "station", "transport",
        ),
        "body": (
            "kopf", "hand", "auge", "nase", "mund", "bein", "herz", "head",
            "eye", "nose", "mouth", "leg", "heart",
        ),
        "clothing": (
            "kleidung", "kleid", "hose", "hemd", "schuh", "jacke", "clothes",
            "dress", "pants", "shirt", "shoe", "jacket",
        ),
        "time": (
            "zeit", "tag", "nacht", "woche", "monat", "jahr", "stunde",
            "time", "day", "night", "week", "month", "year", "hour",
        ),
        "work": (
            "arbeit", "beruf", "büro", "chef", "work", "job", "office",
            "profession",
        ),
        "education": (
            "schule", "universität", "buch", "lernen", "lehrer", "school",
            "university", "book", "learn", "teacher",
        ),
        "weather": (
            "wetter", "regen", "schnee", "sonne", "wind", "wolke", "weather",
            "rain", "snow", "sun", "cloud",
        ),
        "colors": (
            "farbe", "rot", "blau", "grün", "gelb", "schwarz", "weiß",
            "color", "colour", "red", "blue", "green", "yellow", "black",
            "white",
        ),
        "animals": (
            "tier", "hund", "katze", "pferd", "vogel", "fisch", "animal",
            "dog", "cat", "horse", "bird", "fish",
        ),
    }


class FallbackConstants:
    """Suffix rules for the heuristic fallback"""

    FEMININE_SUFFIXES = ("ung", "heit", "keit")
    NEUTER_SUFFIXES = ("chen", "lein")
    VERB_SUFFIXES = ("en", "ieren")
    ADJECTIVE_SUFFIXES = ("ig", "lich", "isch")
    NOUN_EXAMPLE_TEMPLATE = "Das ist {article} {word}."
    OTHER_EXAMPLE_TEMPLATE = "Ich {word}."


class CacheConstants:
    """Constants for caching"""

    CACHE_TABLE = "vocabulary_cache"
    VOCABULARY_TABLE = "vocabulary"
    DEFAULT_LANGUAGE_PAIR = "de-en"


# Words prefetched into the cache on request
COMMON_GERMAN_WORDS = (
    "Haus", "Auto", "Buch", "Wasser", "Brot", "Zeit", "Geld", "Arbeit",
    "Familie", "Freund", "Schule", "Lehrer", "Computer", "Telefon",
    "Restaurant", "Hotel", "Musik", "Film", "Wetter", "Sonne",
)


def language_pair(source_lang: str, target_lang: str) -> str:
    """Format a language pair key such as 'de-en'"""
    return f"{source_lang}-{target_lang}"
