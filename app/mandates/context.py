# mandates/context.py
"""
Template data for the sales mandate.

``MandateTemplateContext`` holds every value the Word template may show and
``TEMPLATE_FIELDS`` is the explicit placeholder -> accessor table that turns
it into the flat dict handed to the template engine. A placeholder that is
not listed here is not part of the template contract.
"""

import logging
from dataclasses import dataclass, field
from operator import attrgetter

from django.utils import timezone

from .formatters import (
    build_term_phrases,
    capitalize_first,
    format_amount,
    format_date,
    plain_number,
    AmountPhrase,
    TermPhrases,
)
from .owners import MAX_OWNERS, OWNER_FIELDS, owner_slots

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = 'ARS'


@dataclass(frozen=True)
class MandateTemplateContext:
    # Property
    titulo: str = ''
    tipo_propiedad: str = ''
    direccion: str = ''
    partida_inmobiliaria: str = ''
    localidad: str = ''
    descripcion: str = ''
    # Mandate
    monto: str = ''
    moneda: str = DEFAULT_CURRENCY
    plazo_dias: str = ''
    monto_texto: str = ''
    monto_en_letras: str = ''
    moneda_nombre: str = ''
    monto_formateado: str = ''
    plazo_dias_texto: str = ''
    plazo_meses_texto: str = ''
    plazo_texto: str = ''
    plazo_texto_capitalizado: str = ''
    observaciones: str = ''
    # Owners, always MAX_OWNERS entries
    owners: tuple = field(default_factory=tuple)
    # Advisor
    asesor_nombre: str = ''
    asesor_email: str = ''
    fecha_actual: str = ''

    def as_dict(self):
        """Flat placeholder dict; every value is a string"""
        return {key: _text(accessor(self)) for key, accessor in TEMPLATE_FIELDS}


def _text(value):
    if value is None:
        return ''
    return str(value)


def _owner_accessor(index, attribute):
    def accessor(context):
        if index >= len(context.owners):
            return ''
        return getattr(context.owners[index], attribute)
    return accessor


TEMPLATE_FIELDS = (
    ('titulo', attrgetter('titulo')),
    ('tipoPropiedad', attrgetter('tipo_propiedad')),
    ('direccion', attrgetter('direccion')),
    ('partidaInmobiliaria', attrgetter('partida_inmobiliaria')),
    ('localidad', attrgetter('localidad')),
    ('descripcion', attrgetter('descripcion')),
    ('monto', attrgetter('monto')),
    ('moneda', attrgetter('moneda')),
    ('plazoDias', attrgetter('plazo_dias')),
    ('montoTexto', attrgetter('monto_texto')),
    ('montoEnLetras', attrgetter('monto_en_letras')),
    ('monedaNombre', attrgetter('moneda_nombre')),
    ('montoFormateado', attrgetter('monto_formateado')),
    ('plazoDiasTexto', attrgetter('plazo_dias_texto')),
    ('plazoMesesTexto', attrgetter('plazo_meses_texto')),
    ('plazoTexto', attrgetter('plazo_texto')),
    ('plazoTextoCapitalizado', attrgetter('plazo_texto_capitalizado')),
    ('observaciones', attrgetter('observaciones')),
) + tuple(
    (f'propietario{index + 1}{suffix}', _owner_accessor(index, attribute))
    for index in range(MAX_OWNERS)
    for suffix, attribute in OWNER_FIELDS
) + (
    ('asesorNombre', attrgetter('asesor_nombre')),
    ('asesorEmail', attrgetter('asesor_email')),
    ('fechaActual', attrgetter('fecha_actual')),
)

TEMPLATE_KEYS = tuple(key for key, _ in TEMPLATE_FIELDS)


def _amount_phrase(mandate, currency):
    if mandate is None or mandate.amount is None:
        return None
    try:
        return format_amount(mandate.amount, currency)
    except ValueError as e:
        logger.warning(f"Could not phrase amount {mandate.amount!r} {currency}: {e}")
        return None


def _term_phrases(mandate):
    if mandate is None:
        return TermPhrases()
    try:
        return build_term_phrases(mandate.term_days)
    except (TypeError, ValueError) as e:
        logger.warning(f"Could not phrase term {mandate.term_days!r}: {e}")
        return TermPhrases()


def build_template_context(property_record, mandate, now=None):
    """
    Assemble the mandate template data from a property and its mandate.

    Total for any property/mandate pair: missing optional values become empty
    strings, formatting failures fall back to plain values and malformed owner
    data yields empty owner slots.
    """
    now = now or timezone.now()

    currency = _text(getattr(mandate, 'currency', None)) or DEFAULT_CURRENCY
    amount = _amount_phrase(mandate, currency) or AmountPhrase(
        legal_phrase='', words='', currency_name='', currency_code=currency,
        numeral=plain_number(getattr(mandate, 'amount', None)),
    )
    terms = _term_phrases(mandate)

    advisor = property_record.advisor if property_record.advisor_id else None

    return MandateTemplateContext(
        titulo=_text(property_record.title),
        tipo_propiedad=_text(property_record.property_type),
        direccion=_text(property_record.address),
        partida_inmobiliaria=_text(property_record.cadastral_reference),
        localidad=_text(property_record.locality),
        descripcion=_text(property_record.description),
        monto=plain_number(getattr(mandate, 'amount', None)),
        moneda=currency,
        plazo_dias=plain_number(getattr(mandate, 'term_days', None)),
        monto_texto=amount.legal_phrase,
        monto_en_letras=amount.words,
        moneda_nombre=amount.currency_name,
        monto_formateado=amount.numeral,
        plazo_dias_texto=terms.days_phrase,
        plazo_meses_texto=terms.months_phrase,
        plazo_texto=terms.smart_phrase,
        plazo_texto_capitalizado=capitalize_first(terms.smart_phrase),
        observaciones=_text(getattr(mandate, 'notes', None)),
        owners=tuple(owner_slots(property_record.owners)),
        asesor_nombre=_text(getattr(advisor, 'name', None)),
        asesor_email=_text(getattr(advisor, 'email', None)),
        fecha_actual=format_date(now),
    )


def build_template_data(property_record, mandate, now=None):
    """Flat placeholder dict ready for the Word template"""
    return build_template_context(property_record, mandate, now=now).as_dict()
