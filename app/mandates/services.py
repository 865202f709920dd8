# mandates/services.py - Mandate document generation service

import logging
import re
import unicodedata

from django.http import HttpResponse
from django.utils import timezone

from .context import build_template_context
from .exceptions import MandateNotFoundError, PropertyNotApprovedError
from .generators import MandatePdfGenerator, MandateWordGenerator

logger = logging.getLogger(__name__)

DOCX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document'
PDF_CONTENT_TYPE = 'application/pdf'

NON_ALPHANUMERIC_RE = re.compile(r'[^A-Za-z0-9]+')


def sanitize_filename(text):
    """Strip accents and replace every run of non-alphanumerics with "_" """
    normalized = unicodedata.normalize('NFKD', text or '')
    ascii_text = normalized.encode('ascii', 'ignore').decode('ascii')
    return NON_ALPHANUMERIC_RE.sub('_', ascii_text).strip('_')


class MandateDocumentService:
    """Builds mandate documents (Word or PDF) for a property and wraps them for download"""

    @classmethod
    def get_filename(cls, property_record, extension):
        title = sanitize_filename(property_record.title)
        if title:
            return f"mandato_{title}_{property_record.id}.{extension}"
        return f"mandato_{property_record.id}.{extension}"

    @classmethod
    def get_mandate(cls, property_record):
        mandate = property_record.get_mandate()
        if mandate is None:
            raise MandateNotFoundError()
        return mandate

    @classmethod
    def generate_word(cls, property_record, template_path=None, now=None):
        """Fill the Word template for an approved property; returns (buffer, filename)"""
        if not property_record.is_approved:
            raise PropertyNotApprovedError(property_record.state)
        mandate = cls.get_mandate(property_record)

        logger.info(f"Starting mandate Word generation for property {property_record.id}")
        context = build_template_context(property_record, mandate, now=now)
        buffer = MandateWordGenerator(template_path=template_path).render(context.as_dict())

        logger.info(
            f"Mandate Word generated for property {property_record.id} "
            f"({sum(1 for owner in context.owners if not owner.is_empty)} owners)"
        )
        return buffer, cls.get_filename(property_record, 'docx')

    @classmethod
    def generate_pdf(cls, property_record, now=None):
        """Lay out the mandate summary PDF; returns (buffer, filename)"""
        mandate = cls.get_mandate(property_record)
        now = now or timezone.now()

        logger.info(f"Starting mandate PDF generation for property {property_record.id}")
        context = build_template_context(property_record, mandate, now=now)
        buffer = MandatePdfGenerator().render(property_record, mandate, context=context, now=now)
        return buffer, cls.get_filename(property_record, 'pdf')

    @staticmethod
    def build_response(buffer, filename, content_type):
        """Attachment response; the document is already fully rendered in memory"""
        response = HttpResponse(buffer.getvalue(), content_type=content_type)
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        return response
