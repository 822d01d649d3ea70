"""Inflection helpers used to derive table names from type names.

    tableize("User")       -> "users"
    tableize("OrderItem")  -> "order_items"
    tableize("Person")     -> "people"
    tableize("audit.Log")  -> "audit.logs"

Irregular and uncountable words are plain data tables; extend them with
:func:`add_irregular` / :func:`add_uncountable`.
"""

from __future__ import annotations

import re
from functools import lru_cache

# singular -> plural
IRREGULARS: dict[str, str] = {
    "person": "people",
    "man": "men",
    "woman": "women",
    "child": "children",
    "mouse": "mice",
    "louse": "lice",
    "goose": "geese",
    "tooth": "teeth",
    "foot": "feet",
    "ox": "oxen",
    "move": "moves",
    "zombie": "zombies",
    "cactus": "cacti",
    "criterion": "criteria",
    # -ie nouns; the -ies -> -y rule would give "cooky"
    "brownie": "brownies",
    "calorie": "calories",
    "cookie": "cookies",
    "freebie": "freebies",
    "goalie": "goalies",
    "hippie": "hippies",
    "necktie": "neckties",
    "pie": "pies",
    "prairie": "prairies",
    "rookie": "rookies",
    "selfie": "selfies",
    "sortie": "sorties",
    "tie": "ties",
}

UNCOUNTABLES: set[str] = {
    "equipment",
    "information",
    "rice",
    "money",
    "species",
    "series",
    "fish",
    "sheep",
    "deer",
    "news",
    "metadata",
    "feedback",
    "software",
    "police",
}

# Checked top to bottom; first match wins.
PLURAL_RULES: list[tuple[str, str]] = [
    (r"(quiz)$", r"\1zes"),
    (r"(matr|vert|ind)(?:ix|ex)$", r"\1ices"),
    (r"(alias|status|campus)$", r"\1es"),
    (r"(octop|vir)(?:us|i)$", r"\1i"),
    (r"(ax|test|cris)is$", r"\1es"),
    (r"(buffal|tomat|potat|her|ech)o$", r"\1oes"),
    (r"(bu)s$", r"\1ses"),
    (r"(x|ch|ss|sh)$", r"\1es"),
    (r"([^aeiouy]|qu)y$", r"\1ies"),
    (r"(hive)$", r"\1s"),
    (r"(?:([^f])fe|([lr])f)$", r"\1\2ves"),
    (r"sis$", "ses"),
    (r"([ti])um$", r"\1a"),
    (r"([ti])a$", r"\1a"),
    (r"s$", "s"),
    (r"$", "s"),
]

SINGULAR_RULES: list[tuple[str, str]] = [
    (r"(database)s$", r"\1"),
    (r"(quiz)zes$", r"\1"),
    (r"(matr)ices$", r"\1ix"),
    (r"(vert|ind)ices$", r"\1ex"),
    (r"(alias|status|campus)(?:es)?$", r"\1"),
    (r"(octop|vir)(?:us|i)$", r"\1us"),
    (r"^(a)x[ie]s$", r"\1xis"),
    (r"(cris|test)(?:is|es)$", r"\1is"),
    (r"(shoe)s$", r"\1"),
    (r"(bus)(?:es)?$", r"\1"),
    (r"(o)es$", r"\1"),
    (r"(x|ch|ss|sh)es$", r"\1"),
    (r"(m)ovies$", r"\1ovie"),
    (r"([^aeiouy]|qu)ies$", r"\1y"),
    (r"([lr])ves$", r"\1f"),
    (r"(tive|hive)s$", r"\1"),
    (r"([^f])ves$", r"\1fe"),
    (r"((a)naly|(b)a|(d)iagno|(p)arenthe|(p)rogno|(s)ynop|(t)he)(?:sis|ses)$", r"\1sis"),
    (r"([ti])a$", r"\1um"),
    (r"(ss)$", r"\1"),
    (r"s$", ""),
]

_COMPILED_PLURALS = [(re.compile(p, re.IGNORECASE), r) for p, r in PLURAL_RULES]
_COMPILED_SINGULARS = [(re.compile(p, re.IGNORECASE), r) for p, r in SINGULAR_RULES]

_LAST_WORD = re.compile(r"^(.*?)([A-Z]?[a-z0-9]*|[A-Z0-9]+)$")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")


def add_irregular(singular: str, plural: str) -> None:
    """Register an irregular singular/plural pair."""
    IRREGULARS[singular.lower()] = plural.lower()
    _clear_caches()


def add_uncountable(word: str) -> None:
    """Register a word that has no distinct plural form."""
    UNCOUNTABLES.add(word.lower())
    _clear_caches()


def _clear_caches() -> None:
    pluralize.cache_clear()
    singularize.cache_clear()
    tableize.cache_clear()


def _split_last_word(word: str) -> tuple[str, str]:
    """Split *word* into (head, last word), honoring ``_``, spaces and CamelCase."""
    for sep in ("_", " ", "-"):
        if sep in word:
            head, _, last = word.rpartition(sep)
            if last:
                return head + sep, last
    match = _LAST_WORD.match(word)
    if match is None or not match.group(2):
        return "", word
    return match.group(1), match.group(2)


def _match_case(source: str, replacement: str) -> str:
    if source[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def _inflect(
    word: str,
    irregulars: dict[str, str],
    known_forms: set[str],
    rules: list[tuple[re.Pattern[str], str]],
) -> str:
    if not word:
        return word
    head, last = _split_last_word(word)
    lowered = last.lower()
    if lowered in UNCOUNTABLES or lowered in known_forms:
        return word
    if lowered in irregulars:
        return head + _match_case(last, irregulars[lowered])
    for pattern, replacement in rules:
        if pattern.search(word):
            return pattern.sub(replacement, word, count=1)
    return word


@lru_cache(maxsize=1024)
def pluralize(word: str) -> str:
    """Return the plural form of *word* (last word only for compounds)."""
    return _inflect(word, IRREGULARS, set(IRREGULARS.values()), _COMPILED_PLURALS)


@lru_cache(maxsize=1024)
def singularize(word: str) -> str:
    """Return the singular form of *word* (last word only for compounds)."""
    singulars = {plural: singular for singular, plural in IRREGULARS.items()}
    return _inflect(word, singulars, set(IRREGULARS), _COMPILED_SINGULARS)


def underscore(word: str) -> str:
    """Convert CamelCase to snake_case.

    ``CreatedAt`` -> ``created_at``, ``HTTPRequest`` -> ``http_request``.
    Already snake_case input is returned unchanged.
    """
    word = _ACRONYM_BOUNDARY.sub(r"\1_\2", word)
    word = _WORD_BOUNDARY.sub(r"\1_\2", word)
    return word.replace("-", "_").replace(" ", "_").lower()


def camelize(word: str) -> str:
    """Convert snake_case to CamelCase."""
    return "".join(part[:1].upper() + part[1:] for part in underscore(word).split("_"))


@lru_cache(maxsize=1024)
def tableize(name: str) -> str:
    """Derive a plural, snake_case table name from a type name.

    A dotted prefix (schema) is kept as-is; only the last segment is
    inflected.
    """
    schema, dot, base = name.rpartition(".")
    return f"{schema}{dot}{pluralize(underscore(base))}"
