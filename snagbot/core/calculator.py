"""Dollar extraction, summing, unit conversion and reply formatting.

WHY: This is the whole joke: find the dollar amounts in a message, add
them up, work out how many units that buys and say so with correct
pluralisation. Keeping it free of Slack and storage makes every step a
pure function that is trivial to test.

HOW: Four stages, each a plain function:
  extract_dollar_values — regex scan for $-prefixed amounts
  sum_dollar_values     — Decimal sum rounded to cents
  convert               — ceiling count plus exact-division flag
  format_response       — "That's nearly 15 Bunnings snags!"
build_response() chains them for one message and one channel config.

RULES:
- Amounts are "$" + digits + optional "." and one or two digits
- The same literal token is only counted once per message
- Rounding is ROUND_HALF_UP (half away from zero) to 2 decimal places
- A total below one unit price is the "wouldn't even buy" case, never 1
- Exactness uses Decimal remainders, never float equality
"""

from __future__ import annotations

import logging
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, List, Optional, Union

from snagbot.core.models import ConversionResult
from snagbot.errors import ErrorKind, InvalidInput

logger = logging.getLogger(__name__)

Number = Union[Decimal, int, float, str]

DOLLAR_PATTERN = re.compile(r"\$([0-9]+(?:\.[0-9]{1,2})?)")

CENTS = Decimal("0.01")
FALLBACK_UNIT_NAME = "item"

_VOWELS = frozenset("aeiou")
_SIBILANT_ENDINGS = ("ch", "sh", "x", "z")


def to_decimal(value: Number) -> Decimal:
    """Coerce an int/float/str/Decimal to Decimal.

    Floats go through str() so 3.5 becomes Decimal("3.5"), not the binary
    expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


# ---------------------------------------------------------------------------
# Extraction and aggregation
# ---------------------------------------------------------------------------


def extract_dollar_values(text: Optional[str]) -> List[Decimal]:
    """Extract every distinct $-prefixed amount from free text.

    WHY: Messages mention prices in all sorts of shapes ("USD$35",
    "be$35please", "$35.50 and $4"). We only care about the numbers.

    HOW: One left-to-right finditer pass, so matches never overlap
    ("$35.50.25" yields only $35.50). Each literal token is remembered and
    a repeat of the same literal is skipped.

    RULES:
    - Returns [] for empty/None text or when nothing matches
    - Never raises; an unparseable token is logged and skipped
    - "$35" and "$35.00" are different literals and both count
    """
    if not text:
        return []

    seen = set()
    values: List[Decimal] = []

    for match in DOLLAR_PATTERN.finditer(text):
        literal = match.group(0)
        if literal in seen:
            continue
        seen.add(literal)

        try:
            values.append(Decimal(match.group(1)))
        except InvalidOperation:
            logger.warning("Failed to parse dollar value %r", literal)

    logger.debug("Extracted %d dollar values from text", len(values))
    return values


def sum_dollar_values(values: Iterable[Number]) -> Decimal:
    """Sum dollar values and round to cents (half away from zero).

    Negative values are summed as-is; positivity of the total is checked
    downstream by convert().
    """
    total = Decimal("0")
    for index, value in enumerate(values):
        amount = to_decimal(value)
        if amount < 0:
            logger.warning("Negative dollar value at index %d: %s", index, amount)
        total += amount
    try:
        return total.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidInput(ErrorKind.INVALID_INPUT, "total too large: {}".format(total))


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def _validate_operands(total: Decimal, unit_price: Decimal) -> None:
    if not unit_price.is_finite() or unit_price <= 0:
        raise InvalidInput(ErrorKind.INVALID_INPUT, "invalid price per item: {}".format(unit_price))
    if not total.is_finite() or total < 0:
        raise InvalidInput(ErrorKind.INVALID_INPUT, "negative total amount: {}".format(total))


def _divmod(total: Decimal, unit_price: Decimal):
    # Quotients beyond the context precision raise DivisionImpossible
    try:
        return divmod(total, unit_price)
    except InvalidOperation:
        raise InvalidInput(ErrorKind.INVALID_INPUT, "total too large: {}".format(total))


def is_exact_division(total: Number, unit_price: Number) -> bool:
    """True iff total is a whole multiple of unit_price.

    Returns False for a non-positive price instead of raising.
    """
    total_d = to_decimal(total)
    price_d = to_decimal(unit_price)
    if price_d <= 0:
        return False
    return _divmod(total_d, price_d)[1] == 0


def calculate_item_count(total: Number, unit_price: Number) -> int:
    """Plain ceiling of total / unit_price, without the zero special case.

    Raises InvalidInput for a negative total or a non-positive price.
    """
    total_d = to_decimal(total)
    price_d = to_decimal(unit_price)
    _validate_operands(total_d, price_d)

    quotient, remainder = _divmod(total_d, price_d)
    count = int(quotient)
    if remainder:
        count += 1
    return count


def convert(total: Number, unit_price: Number) -> ConversionResult:
    """Convert a dollar total into a unit count.

    WHY: The reply needs both how many units and whether to say "nearly".

    HOW: Validates operands, short-circuits totals below one unit to a
    count of zero, otherwise takes the Decimal quotient and remainder. A
    non-zero remainder rounds the count up and clears is_exact.

    RULES:
    - unit_price <= 0 or total < 0 → InvalidInput
    - 0 <= total < unit_price → item_count 0
    - otherwise item_count = ceil(total / unit_price)
    - is_exact iff the remainder is exactly zero
    """
    total_d = to_decimal(total)
    price_d = to_decimal(unit_price)
    _validate_operands(total_d, price_d)

    exact = is_exact_division(total_d, price_d)
    if total_d < price_d:
        return ConversionResult(item_count=0, is_exact=exact)

    count = calculate_item_count(total_d, price_d)
    logger.debug("Converted $%s at $%s per item to %d items", total_d, price_d, count)
    return ConversionResult(item_count=count, is_exact=exact)


# ---------------------------------------------------------------------------
# Pluralisation and formatting
# ---------------------------------------------------------------------------


def _match_case(replacement: str, reference: str) -> str:
    return replacement.upper() if reference.isupper() else replacement


def singular_form(unit_name: str) -> str:
    """Best-effort singular of a unit name.

    RULES:
    - "-ies" → "-y" ("candies" → "candy")
    - "-ches", "-shes", "-xes", "-zes", "-sses" → drop "es" ("watches" → "watch")
    - "-ss" is left alone ("glass")
    - any other trailing "s" is dropped ("snags" → "snag", "coffees" → "coffee")
    - irregular plurals ("mice") are not handled
    """
    lower = unit_name.lower()
    if not lower.endswith("s") or lower.endswith("ss"):
        return unit_name
    if lower.endswith("ies") and len(lower) > 3:
        return unit_name[:-3] + _match_case("y", unit_name[-3:])
    if lower.endswith("es"):
        stem = lower[:-2]
        if stem.endswith(_SIBILANT_ENDINGS) or stem.endswith("ss"):
            return unit_name[:-2]
    return unit_name[:-1]


def plural_form(unit_name: str) -> str:
    """Best-effort plural of a unit name.

    RULES:
    - already ending in "s" → unchanged (so plural_form is idempotent)
    - consonant + "y" → "ies" ("candy" → "candies"); vowel + "y" → "ys"
    - "-ch", "-sh", "-x", "-z" → "es" ("watch" → "watches")
    - otherwise append "s"
    """
    lower = unit_name.lower()
    if lower.endswith("s"):
        return unit_name
    if lower.endswith("y") and len(lower) > 1 and lower[-2] not in _VOWELS:
        return unit_name[:-1] + _match_case("ies", unit_name[-1])
    if lower.endswith(_SIBILANT_ENDINGS):
        return unit_name + _match_case("es", unit_name[-1])
    return unit_name + _match_case("s", unit_name[-1])


def format_response(count: int, unit_name: str, is_exact: bool) -> str:
    """Render the reply sentence for a conversion result."""
    unit_name = unit_name.strip()
    if not unit_name:
        logger.warning("Empty unit name passed to format_response, using %r", FALLBACK_UNIT_NAME)
        unit_name = FALLBACK_UNIT_NAME

    if count <= 0:
        return "That wouldn't even buy a single {}!".format(singular_form(unit_name))

    prefix = "That's " if is_exact else "That's nearly "
    if count == 1:
        return "{}1 {}!".format(prefix, singular_form(unit_name))
    return "{}{} {}!".format(prefix, count, plural_form(unit_name))


# ---------------------------------------------------------------------------
# Convenience
# ---------------------------------------------------------------------------


def build_response(text: Optional[str], unit_name: str, unit_price: Number) -> Optional[str]:
    """Run extract → sum → convert → format for one message.

    Returns None when the text contains no dollar amounts. Raises
    InvalidInput when the total is negative or the price is not positive.
    """
    values = extract_dollar_values(text)
    if not values:
        return None

    total = sum_dollar_values(values)
    result = convert(total, unit_price)
    return format_response(result.item_count, unit_name, result.is_exact)
