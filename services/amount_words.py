from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP

ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
]

TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

CRORE = 10_000_000
LAKH = 100_000
THOUSAND = 1_000


def _two_digits(num: int) -> str:
    if num < 20:
        return ONES[num]
    ten, one = divmod(num, 10)
    return TENS[ten] + (" " + ONES[one] if one else "")


def _three_digits(num: int) -> str:
    hundred, rest = divmod(num, 100)
    if hundred == 0:
        return _two_digits(rest)
    return ONES[hundred] + " Hundred" + (" " + _two_digits(rest) if rest else "")


def _indian_words(num: int) -> str:
    """
    Words for a positive integer using Crore / Lakh / Thousand grouping.
    A crore count above 99 is itself spelled in the same system
    ("One Thousand Crore").
    """
    crore = num // CRORE
    lakh = (num % CRORE) // LAKH
    thousand = (num % LAKH) // THOUSAND
    hundred = num % THOUSAND

    parts: list[str] = []
    if crore:
        parts.append(_indian_words(crore) + " Crore")
    if lakh:
        parts.append(_two_digits(lakh) + " Lakh")
    if thousand:
        parts.append(_two_digits(thousand) + " Thousand")
    if hundred:
        parts.append(_three_digits(hundred))
    return " ".join(parts)


def words_for(amount) -> str:
    """
    Indian-English words for a rupee amount, as printed on invoices.

    >>> words_for(Decimal("100000"))
    'One Lakh Rupees Only'
    >>> words_for(Decimal("0.50"))
    'Fifty Paise Only'
    """
    amount = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    if amount == 0:
        return "Zero Rupees Only"
    if amount < 0:
        return "Minus " + words_for(-amount)

    rupees = int(amount.to_integral_value(rounding=ROUND_FLOOR))
    paise = int(((amount - rupees) * 100).to_integral_value(rounding=ROUND_HALF_UP))

    words = ""
    if rupees > 0:
        words = _indian_words(rupees) + " Rupees"

    if paise > 0:
        if words:
            words += " and "
        words += _two_digits(paise) + " Paise"

    return words + " Only"


def format_indian_currency(amount) -> str:
    """Format like 1,23,456.00 with the rupee sign (last 3 digits, then groups of 2)."""
    amount = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    rupees, paise = f"{abs(amount):.2f}".split(".")

    if len(rupees) <= 3:
        grouped = rupees
    else:
        grouped = rupees[-3:]
        remaining = rupees[:-3]
        while remaining:
            grouped = remaining[-2:] + "," + grouped
            remaining = remaining[:-2]

    sign = "-" if amount < 0 else ""
    return f"₹{sign}{grouped}.{paise}"
