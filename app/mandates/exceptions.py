# mandates/exceptions.py

from dataclasses import dataclass, asdict

from rest_framework import status


class NumberToWordsError(ValueError):
    """Raised for numbers outside the supported cardinal range"""


class UnsupportedCurrencyError(ValueError):
    """Raised for currency codes the amount formatter has no name for"""


@dataclass(frozen=True)
class TemplateTagError:
    """One malformed placeholder found in a Word template"""
    tag: str
    message: str
    location: str = ''

    def as_dict(self):
        data = asdict(self)
        return {
            'etiqueta': data['tag'],
            'mensaje': data['message'],
            'ubicacion': data['location'],
        }


class MandateDocumentError(Exception):
    """Base error for mandate document generation, mapped to a JSON error response"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = 'Error interno al generar el mandato'

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def as_response_data(self):
        data = {'error': self.message}
        if self.details:
            data['detalles'] = self.details
        return data


class MandateNotFoundError(MandateDocumentError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Este expediente no tiene un mandato creado'


class PropertyNotApprovedError(MandateDocumentError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'El expediente debe estar APROBADO para generar el mandato'

    def __init__(self, current_state, message=None):
        self.current_state = current_state
        super().__init__(message)

    def as_response_data(self):
        data = super().as_response_data()
        data['estadoActual'] = self.current_state
        return data


class TemplateMissingError(MandateDocumentError):
    default_message = 'Plantilla de mandato no encontrada'

    def __init__(self, template_path):
        self.template_path = str(template_path)
        super().__init__(details=f'No existe el archivo de plantilla: {self.template_path}')


class TemplateRenderError(MandateDocumentError):
    default_message = 'Error al procesar la plantilla del mandato'
    hint = 'Verifica que los placeholders en la plantilla Word estén bien formados: {{nombreDelPlaceholder}}'

    def __init__(self, errors, details=None):
        self.errors = list(errors)
        if details is None:
            details = f'{len(self.errors)} error(es) en la plantilla'
        super().__init__(details=details)

    def as_response_data(self):
        data = super().as_response_data()
        data['errores'] = [error.as_dict() for error in self.errors]
        data['sugerencia'] = self.hint
        return data
