# mandates/formatters.py
"""
Argentine Spanish formatting helpers used to fill mandate documents.

Numbers are spelled with ``num2words`` and numerals/dates are rendered with
``babel`` using the ``es_AR`` locale, e.g.::

    >>> build_term_phrases(90).smart_phrase
    'tres (3) meses'
    >>> format_amount(90000, 'ARS').legal_phrase
    'PESOS ARGENTINOS NOVENTA MIL (ARS 90.000)'
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from babel.dates import format_date as babel_format_date, format_time as babel_format_time
from babel.numbers import format_decimal
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from num2words import num2words

from .exceptions import NumberToWordsError, UnsupportedCurrencyError

logger = logging.getLogger(__name__)

LOCALE = 'es_AR'
MAX_CARDINAL = 999_999_999
DAYS_PER_MONTH = 30
CENTS = Decimal('0.01')

CURRENCY_NAMES = {
    'ARS': 'PESOS ARGENTINOS',
    'USD': 'DÓLARES ESTADOUNIDENSES',
}


@dataclass(frozen=True)
class AmountPhrase:
    legal_phrase: str
    words: str
    currency_name: str
    currency_code: str
    numeral: str


@dataclass(frozen=True)
class TermPhrases:
    days_phrase: str = ''
    months_phrase: str = ''
    smart_phrase: str = ''


# region <Number to words>
def number_to_words(number):
    """
    Spell a non-negative integer as Spanish cardinal words (lower case).

    Supports 0 to 999.999.999; anything else raises ``NumberToWordsError``
    instead of being truncated.
    """
    if isinstance(number, bool) or not isinstance(number, int):
        raise NumberToWordsError(f'Only integers can be spelled, got {number!r}')
    if number < 0 or number > MAX_CARDINAL:
        raise NumberToWordsError(f'{number} is outside the supported range 0..{MAX_CARDINAL}')
    return num2words(number, lang='es')


def number_to_words_or_numeral(number):
    """Spell ``number``, falling back to the plain numeral if conversion fails"""
    try:
        return number_to_words(number)
    except Exception as e:
        logger.warning(f"Could not spell {number!r}, using the numeral instead: {e}")
        return str(number)


def apocopate(words):
    """Shorten a trailing "uno" when the number precedes a masculine noun (un mes, veintiún días)"""
    if words.endswith('veintiuno'):
        return words[:-len('veintiuno')] + 'veintiún'
    if words == 'uno' or words.endswith(' uno'):
        return words[:-len('uno')] + 'un'
    return words


def capitalize_first(text):
    return text[:1].upper() + text[1:] if text else text
# endregion


# region <Amounts>
def to_amount(value):
    """Parse ``value`` into a non-negative Decimal rounded to cents"""
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValueError(f'Invalid amount: {value!r}') from e

    if not amount.is_finite() or amount < 0:
        raise ValueError(f'Amount must be a non-negative number, got {value!r}')
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_numeral(amount):
    """es-AR numeral: "90.000" without cents, "90.000,50" with cents"""
    amount = to_amount(amount)
    pattern = '#,##0' if amount == amount.to_integral_value() else '#,##0.00'
    return format_decimal(amount, format=pattern, locale=LOCALE)


def format_amount(amount, currency='ARS'):
    """
    Compose the legal wording of an amount.

    Returns an ``AmountPhrase`` whose ``legal_phrase`` reads
    ``"{CURRENCY NAME} {WORDS} ({CODE} {numeral})"``; the words carry a
    ``" con NN/100"`` suffix only when the amount has cents.
    """
    currency = (currency or '').upper()
    if currency not in CURRENCY_NAMES:
        raise UnsupportedCurrencyError(f'Unsupported currency: {currency!r}')

    amount = to_amount(amount)
    integer_part = int(amount)
    cents = int((amount - integer_part) * 100)

    words = number_to_words_or_numeral(integer_part)
    if cents > 0:
        words = f'{words} con {cents:02d}/100'
    words = words.upper()

    currency_name = CURRENCY_NAMES[currency]
    numeral = format_numeral(amount)

    return AmountPhrase(
        legal_phrase=f'{currency_name} {words} ({currency} {numeral})',
        words=words,
        currency_name=currency_name,
        currency_code=currency,
        numeral=numeral,
    )


def plain_number(value):
    """Stringify a number for direct display: 90000, 90000.5"""
    if value is None or value == '':
        return ''
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return str(value)
    if number == number.to_integral_value():
        return str(int(number))
    return format(number.normalize(), 'f')
# endregion


# region <Terms>
def _count_phrase(count, singular, plural):
    words = apocopate(number_to_words_or_numeral(count))
    return f'{words} ({count}) {singular if count == 1 else plural}'


def build_term_phrases(days):
    """
    Phrase a mandate term given in days.

    ``days_phrase`` is always built for a positive term; ``months_phrase``
    only when the term is a whole number of 30 day months; ``smart_phrase``
    prefers the months wording. A zero term yields empty phrases.
    """
    days = int(days or 0)
    if days < 0:
        raise ValueError(f'Term must not be negative, got {days}')
    if days == 0:
        return TermPhrases()

    days_phrase = _count_phrase(days, 'día', 'días')
    months_phrase = ''
    if days % DAYS_PER_MONTH == 0:
        months_phrase = _count_phrase(days // DAYS_PER_MONTH, 'mes', 'meses')

    return TermPhrases(
        days_phrase=days_phrase,
        months_phrase=months_phrase,
        smart_phrase=months_phrase or days_phrase,
    )
# endregion


# region <Dates>
def _coerce_datetime(value):
    """Turn ``value`` into a date/datetime, localizing aware datetimes"""
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        parsed = parse_datetime(text) or parse_date(text)
        if parsed is None:
            raise ValueError(f'Unrecognised date: {value!r}')
        value = parsed

    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value
    if isinstance(value, date):
        return value
    raise ValueError(f'Unsupported date value: {value!r}')


def format_date(value):
    """Argentine short date (d/M/yyyy); empty string for missing or invalid input"""
    if value is None or value == '':
        return ''
    try:
        value = _coerce_datetime(value)
        if value is None:
            return ''
        if isinstance(value, datetime):
            value = value.date()
        return babel_format_date(value, format='d/M/y', locale=LOCALE)
    except ValueError as e:
        logger.warning(f"Could not format date {value!r}: {e}")
        return ''


def format_time(value):
    """24h time of a datetime (HH:mm:ss); empty string when not available"""
    if value is None or value == '':
        return ''
    try:
        value = _coerce_datetime(value)
        if not isinstance(value, datetime):
            return ''
        return babel_format_time(value.time(), format='HH:mm:ss', locale=LOCALE)
    except ValueError as e:
        logger.warning(f"Could not format time {value!r}: {e}")
        return ''
# endregion
