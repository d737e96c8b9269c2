"""
French spelling of monetary amounts ("montant en lettres").

Bank transfer orders repeat the amount in words under the figures. French
numerals are irregular enough that each rule is spelled out here:

- Hundreds: "cent" takes an "s" only when it closes the chunk and is
  multiplied (200 -> "deux cents", 201 -> "deux cent un")
- 21, 31, ... 61 join with "et" ("vingt et un"); every other compound uses a hyphen
- 70-79 and 90-99 build on the teens ("soixante-dix", "quatre-vingt-onze")
- 80 alone is "quatre-vingts"; followed by a unit it loses the "s"
- 1000 is "mille", never "un mille"; "mille" is invariable while
  "million", "milliard", ... agree in number

Design Decisions:
- Pure functions over int/Decimal, no locale or gettext machinery
- Cents are rounded half-up to two digits, carrying into the integer part
- Negative amounts are spelled with a "moins" prefix instead of raising
"""

from decimal import ROUND_HALF_UP, Decimal

UNITS = ["", "un", "deux", "trois", "quatre", "cinq", "six", "sept", "huit", "neuf"]

TEENS = [
    "dix",
    "onze",
    "douze",
    "treize",
    "quatorze",
    "quinze",
    "seize",
    "dix-sept",
    "dix-huit",
    "dix-neuf",
]

# 70s and 90s reuse the 60 and 80 bases with a teen
TENS = [
    "",
    "dix",
    "vingt",
    "trente",
    "quarante",
    "cinquante",
    "soixante",
    "soixante",
    "quatre-vingt",
    "quatre-vingt",
]

# Long scale, as used in French
SCALES = ["", "mille", "million", "milliard", "billion", "billiard"]

ZERO = "zéro"

CENT = Decimal("0.01")

# First whole amount the scale table cannot spell
SPELLABLE_LIMIT = 1000 ** len(SCALES)


def _below_hundred(n: int) -> str:
    """Spell 0-99 (0 yields an empty string)."""
    if n < 10:
        return UNITS[n]
    if n < 20:
        return TEENS[n - 10]

    ten, unit = divmod(n, 10)
    if ten in (7, 9):
        return f"{TENS[ten]}-{TEENS[unit]}"
    if ten == 8:
        return f"{TENS[ten]}-{UNITS[unit]}" if unit else "quatre-vingts"
    if unit == 0:
        return TENS[ten]
    if unit == 1:
        return f"{TENS[ten]} et un"
    return f"{TENS[ten]}-{UNITS[unit]}"


def _chunk_to_words(chunk: int) -> str:
    """Spell a base-1000 chunk (1-999)."""
    hundreds, remainder = divmod(chunk, 100)
    words: list[str] = []

    if hundreds:
        head = "cent" if hundreds == 1 else f"{UNITS[hundreds]} cent"
        if remainder == 0 and hundreds > 1:
            head += "s"
        words.append(head)

    if remainder:
        words.append(_below_hundred(remainder))

    return " ".join(words)


def integer_to_words(n: int) -> str:
    """
    Spell a whole number in lowercase French.

    Args:
        n: Any integer below one thousand billiards (10**18)

    Returns:
        Words such as "mille deux cent trente-quatre"

    Raises:
        ValueError: If the number has more digits than the scale table covers
    """
    if n < 0:
        return f"moins {integer_to_words(-n)}"
    if n == 0:
        return ZERO
    if n >= SPELLABLE_LIMIT:
        raise ValueError(f"Number too large to spell out: {n}")

    parts: list[str] = []
    position = 0
    remaining = n

    while remaining:
        remaining, chunk = divmod(remaining, 1000)
        if chunk:
            if position == 0:
                parts.append(_chunk_to_words(chunk))
            elif position == 1 and chunk == 1:
                parts.append(SCALES[1])
            else:
                name = SCALES[position]
                if position > 1 and chunk > 1:
                    name += "s"
                parts.append(f"{_chunk_to_words(chunk)} {name}")
        position += 1

    return " ".join(reversed(parts))


def split_amount(amount: Decimal | int | float | str) -> tuple[int, int]:
    """
    Split an amount into its whole units and rounded cents.

    The sign is dropped; callers check it separately.

    Example:
        >>> split_amount("1234.567")
        (1234, 57)
    """
    value = abs(Decimal(str(amount))).quantize(CENT, rounding=ROUND_HALF_UP)
    integer_part = int(value)
    cents = int((value - integer_part) * 100)
    return integer_part, cents


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def amount_to_words(
    amount: Decimal | int | float | str,
    main_unit: str,
    sub_unit: str,
) -> str:
    """
    Spell a monetary amount in French, units included.

    Args:
        amount: Amount in main units (Decimal preferred)
        main_unit: Singular major denomination, e.g. "dirham"
        sub_unit: Singular minor denomination, e.g. "centime"

    Returns:
        Capitalized words, e.g.
        "Mille deux cent trente-quatre dirhams et cinquante-six centimes"
    """
    negative = Decimal(str(amount)) < 0
    integer_part, cents = split_amount(amount)

    integer_words = integer_to_words(integer_part)
    # "-0.004" rounds to nothing and reads as plain zero
    if negative and (integer_part or cents):
        integer_words = f"moins {integer_words}"

    main_text = main_unit + ("s" if integer_part > 1 else "")
    result = f"{_capitalize(integer_words)} {main_text}"

    if cents > 0:
        sub_text = sub_unit + ("s" if cents > 1 else "")
        result += f" et {integer_to_words(cents)} {sub_text}"

    return result
