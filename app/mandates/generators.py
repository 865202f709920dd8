# mandates/generators.py

import logging
import os
import re
from io import BytesIO
from xml.sax.saxutils import escape

from django.conf import settings
from django.utils import timezone
from docx import Document
from docxtpl import DocxTemplate
from jinja2 import ChainableUndefined, Environment, TemplateSyntaxError
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from .context import build_template_context
from .exceptions import TemplateMissingError, TemplateRenderError, TemplateTagError
from .formatters import format_date, format_time

logger = logging.getLogger(__name__)

TAG_DELIMITER_RE = re.compile(r'\{\{|\}\}')
RICH_TEXT_PREFIX_RE = re.compile(r'^r\s+')


def _template_environment():
    """Placeholders missing from the context render as empty text"""
    return Environment(undefined=ChainableUndefined, autoescape=True)


class MandateWordGenerator:
    """Fills the sales mandate Word template ({{placeholder}} tags) with docxtpl"""

    def __init__(self, template_path=None):
        self.template_path = str(template_path or settings.MANDATE_TEMPLATE_PATH)

    def render(self, context):
        """Render ``context`` (flat placeholder dict) and return the .docx as BytesIO"""
        if not os.path.exists(self.template_path):
            logger.error(f"Template not found at: {self.template_path}")
            raise TemplateMissingError(self.template_path)

        errors = self.validate_template()
        if errors:
            for index, error in enumerate(errors, start=1):
                logger.error(f"[Template error {index}] {error.location}: {error.message} ({error.tag!r})")
            raise TemplateRenderError(errors)

        doc = DocxTemplate(self.template_path)
        try:
            doc.render(context, jinja_env=_template_environment(), autoescape=True)
        except TemplateSyntaxError as e:
            logger.error(f"Error rendering mandate template: {e}")
            error = TemplateTagError(
                tag=e.name or '',
                message=e.message or str(e),
                location=f'línea {e.lineno} del documento',
            )
            raise TemplateRenderError([error], details=str(e)) from e

        result = BytesIO()
        doc.save(result)
        result.seek(0)

        logger.info(f"Mandate document rendered with {len(context)} context variables")
        return result

    def validate_template(self):
        """
        Scan every paragraph of the template for malformed placeholders.

        All problems are collected (unclosed ``{{``, stray ``}}``, empty tags
        and tags that are not valid expressions) so the template author can
        fix them in one pass.
        """
        document = Document(self.template_path)
        env = _template_environment()
        errors = []
        for location, paragraph in self._iter_paragraphs(document):
            errors.extend(self._scan_text(paragraph.text, location, env))
        return errors

    @staticmethod
    def _iter_paragraphs(document):
        for index, paragraph in enumerate(document.paragraphs, start=1):
            yield f'párrafo {index}', paragraph

        seen_cells = set()
        for table_index, table in enumerate(document.tables, start=1):
            for row_index, row in enumerate(table.rows, start=1):
                for cell_index, cell in enumerate(row.cells, start=1):
                    # merged cells are returned once per grid column
                    if id(cell._tc) in seen_cells:
                        continue
                    seen_cells.add(id(cell._tc))
                    for paragraph in cell.paragraphs:
                        yield f'tabla {table_index}, fila {row_index}, celda {cell_index}', paragraph

        for section_index, section in enumerate(document.sections, start=1):
            for part_name, part in (('encabezado', section.header), ('pie de página', section.footer)):
                if part.is_linked_to_previous:
                    continue
                for paragraph in part.paragraphs:
                    yield f'{part_name} de la sección {section_index}', paragraph

    @staticmethod
    def _scan_text(text, location, env):
        errors = []
        open_at = None

        for match in TAG_DELIMITER_RE.finditer(text):
            if match.group() == '{{':
                if open_at is not None:
                    errors.append(TemplateTagError(
                        tag=text[open_at:match.start()],
                        message='Etiqueta sin cerrar: falta "}}"',
                        location=location,
                    ))
                open_at = match.start()
                continue

            if open_at is None:
                errors.append(TemplateTagError(
                    tag=text[max(0, match.start() - 20):match.end()],
                    message='Cierre "}}" sin apertura "{{"',
                    location=location,
                ))
                continue

            tag = text[open_at:match.end()]
            expression = RICH_TEXT_PREFIX_RE.sub('', text[open_at + 2:match.start()].strip())
            open_at = None

            if not expression:
                errors.append(TemplateTagError(tag=tag, message='Etiqueta vacía', location=location))
                continue
            try:
                env.parse('{{ ' + expression + ' }}')
            except TemplateSyntaxError as e:
                errors.append(TemplateTagError(tag=tag, message=e.message or str(e), location=location))

        if open_at is not None:
            errors.append(TemplateTagError(
                tag=text[open_at:],
                message='Etiqueta sin cerrar: falta "}}"',
                location=location,
            ))
        return errors


class MandatePdfGenerator:
    """Lays out the mandate summary PDF directly with reportlab"""

    def __init__(self, company_name=None):
        self.company_name = company_name or getattr(settings, 'COMPANY_NAME', 'Coldwell Banker')

    def render(self, property_record, mandate, context=None, now=None):
        now = now or timezone.now()
        if context is None:
            context = build_template_context(property_record, mandate, now=now)

        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            topMargin=50,
            bottomMargin=50,
            leftMargin=50,
            rightMargin=50,
            title=f"Mandato de venta - expediente {property_record.id}",
            author=self.company_name,
        )

        styles = self._styles()
        story = []
        story += self._title_block(styles)
        story += self._property_section(styles, property_record, context)
        story += self._mandate_section(styles, mandate, context)
        story += self._advisor_section(styles, context)
        story += self._footer(styles, now)

        doc.build(story)
        buffer.seek(0)

        logger.info(f"Mandate PDF rendered for property {property_record.id}")
        return buffer

    @staticmethod
    def _styles():
        return {
            'title': ParagraphStyle('title', fontName='Helvetica-Bold', fontSize=24, leading=30,
                                    alignment=TA_CENTER),
            'subtitle': ParagraphStyle('subtitle', fontName='Helvetica', fontSize=12, leading=16,
                                       alignment=TA_CENTER),
            'heading': ParagraphStyle('heading', fontName='Helvetica-Bold', fontSize=14, leading=18,
                                      spaceAfter=8),
            'label': ParagraphStyle('label', fontName='Helvetica-Bold', fontSize=11, leading=15),
            'body': ParagraphStyle('body', fontName='Helvetica', fontSize=11, leading=15),
            'footer': ParagraphStyle('footer', fontName='Helvetica', fontSize=9, leading=12,
                                     alignment=TA_CENTER, textColor=colors.HexColor('#666666')),
        }

    @staticmethod
    def _line(styles, text):
        return Paragraph(escape(text), styles['body'])

    @staticmethod
    def _heading(styles, text):
        return Paragraph(f'<u>{escape(text)}</u>', styles['heading'])

    def _title_block(self, styles):
        return [
            Paragraph('MANDATO DE VENTA', styles['title']),
            Spacer(1, 6),
            Paragraph(escape(self.company_name), styles['subtitle']),
            Spacer(1, 28),
        ]

    def _property_section(self, styles, property_record, context):
        owner_name = property_record.owner_name or (context.owners[0].nombre if context.owners else '')
        flowables = [
            self._heading(styles, 'Datos del Expediente'),
            self._line(styles, f'Expediente N°: {property_record.id}'),
            self._line(styles, f'Título: {property_record.title}'),
            self._line(styles, f'Propietario: {owner_name}'),
            self._line(styles, f'Estado: {property_record.state}'),
        ]
        if property_record.description:
            flowables.append(self._line(styles, f'Descripción: {property_record.description}'))
        flowables.append(Spacer(1, 20))
        return flowables

    def _mandate_section(self, styles, mandate, context):
        term = context.plazo_dias_texto or f'{context.plazo_dias} días'
        flowables = [
            self._heading(styles, 'Datos del Mandato'),
            self._line(styles, f'Mandato N°: {mandate.id}'),
            self._line(styles, f'Plazo: {term}'),
            self._line(styles, f'Monto: {context.moneda} {context.monto_formateado}'),
            self._line(styles, f'Estado: {mandate.state}'),
        ]
        if mandate.notes:
            flowables.append(self._line(styles, f'Observaciones: {mandate.notes}'))

        flowables.append(Spacer(1, 12))
        flowables.append(self._line(
            styles, f'Fecha de creación: {format_date(mandate.created_at)} {format_time(mandate.created_at)}'
        ))

        if mandate.is_signed and mandate.signed_by:
            flowables.append(Spacer(1, 12))
            flowables.append(Paragraph('Firma:', styles['label']))
            flowables.append(self._line(styles, f'Firmado por: {mandate.signed_by}'))
            if mandate.signed_at:
                flowables.append(self._line(
                    styles, f'Fecha de firma: {format_date(mandate.signed_at)} {format_time(mandate.signed_at)}'
                ))

        flowables.append(Spacer(1, 24))
        return flowables

    def _advisor_section(self, styles, context):
        if not (context.asesor_nombre or context.asesor_email):
            return []
        return [
            self._heading(styles, 'Asesor Responsable'),
            self._line(styles, f'Nombre: {context.asesor_nombre}'),
            self._line(styles, f'Email: {context.asesor_email}'),
        ]

    @staticmethod
    def _footer(styles, now):
        return [
            Spacer(1, 36),
            Paragraph('Este documento fue generado automáticamente por el sistema de gestión de expedientes.',
                      styles['footer']),
            Paragraph(f'Generado el {format_date(now)} a las {format_time(now)}', styles['footer']),
        ]
