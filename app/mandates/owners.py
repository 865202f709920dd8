# mandates/owners.py

import json
import logging
from dataclasses import dataclass, fields

logger = logging.getLogger(__name__)

MAX_OWNERS = 3

# Template suffix -> Owner attribute, in template order
OWNER_FIELDS = (
    ('Nombre', 'nombre'),
    ('Dni', 'dni'),
    ('FechaNacimiento', 'fecha_nacimiento'),
    ('LugarNacimiento', 'lugar_nacimiento'),
    ('Domicilio', 'domicilio'),
    ('Celular', 'celular'),
    ('Cuil', 'cuil'),
    ('EstadoCivil', 'estado_civil'),
    ('Email', 'email'),
)


def _clean(value):
    if value is None:
        return ''
    return str(value).strip()


def _first_present(payload, *keys):
    """Value of the first key holding something other than None/blank"""
    for key in keys:
        value = _clean(payload.get(key))
        if value:
            return value
    return ''


@dataclass(frozen=True)
class Owner:
    """Canonical owner record, whatever shape the stored JSON used"""
    nombre: str = ''
    dni: str = ''
    fecha_nacimiento: str = ''
    lugar_nacimiento: str = ''
    domicilio: str = ''
    celular: str = ''
    cuil: str = ''
    estado_civil: str = ''
    email: str = ''

    @classmethod
    def from_payload(cls, payload):
        """Normalize one stored owner dict; alternate key names are resolved here only"""
        if not isinstance(payload, dict):
            return cls()
        return cls(
            nombre=_first_present(payload, 'nombreCompleto', 'nombre'),
            dni=_first_present(payload, 'dni'),
            fecha_nacimiento=_first_present(payload, 'fechaNacimiento'),
            lugar_nacimiento=_first_present(payload, 'lugarNacimiento'),
            domicilio=_first_present(payload, 'domicilioReal', 'domicilio'),
            celular=_first_present(payload, 'celular'),
            cuil=_first_present(payload, 'cuil', 'cuitCuil'),
            estado_civil=_first_present(payload, 'estadoCivil'),
            email=_first_present(payload, 'email'),
        )

    @property
    def is_empty(self):
        return not any(getattr(self, f.name) for f in fields(self))


EMPTY_OWNER = Owner()


def parse_owners(raw):
    """
    Decode the owners stored on a property.

    ``raw`` is normally the JSON text saved on the record, but an already
    decoded list is accepted too. Malformed JSON or a document that is not a
    list is logged and treated as "no owners"; entries that are not objects
    become empty owners so the remaining ones keep their position.
    """
    if raw is None or raw == '':
        return []

    data = raw
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.error(f"Error parsing owners JSON, continuing without owners: {e}")
            return []

    if not isinstance(data, list):
        logger.error(f"Owners JSON is not a list ({type(data).__name__}), continuing without owners")
        return []

    return [Owner.from_payload(item) for item in data]


def owner_slots(raw, slots=MAX_OWNERS):
    """Exactly ``slots`` owners, padded with empty ones"""
    owners = parse_owners(raw)
    if len(owners) > slots:
        logger.warning(f"{len(owners)} owners stored, only the first {slots} are used")
    owners = owners[:slots]
    return owners + [EMPTY_OWNER] * (slots - len(owners))


def owner_keys(position):
    """Template keys for the owner in 1-based ``position``"""
    return [(f'propietario{position}{suffix}', attribute) for suffix, attribute in OWNER_FIELDS]


def build_owner_context(raw):
    """Flat ``propietario{N}{Campo}`` dict for the three owner slots"""
    context = {}
    for position, owner in enumerate(owner_slots(raw), start=1):
        for key, attribute in owner_keys(position):
            context[key] = getattr(owner, attribute)
    return context
