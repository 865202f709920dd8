"""
Tests for the Word and PDF mandate generators
"""
import os
import shutil
import tempfile
from datetime import datetime
from decimal import Decimal

from django.conf import settings
from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from docx import Document

from core.models import Mandate, Property
from mandates.context import TEMPLATE_KEYS, build_template_data
from mandates.exceptions import TemplateMissingError, TemplateRenderError
from mandates.generators import MandatePdfGenerator, MandateWordGenerator

NOW = timezone.make_aware(datetime(2024, 3, 5, 12, 0))


def document_text(source):
    """All paragraph text of a .docx (body, tables, headers)"""
    document = Document(source)
    texts = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            for cell in row.cells:
                texts.extend(paragraph.text for paragraph in cell.paragraphs)
    for section in document.sections:
        texts.extend(paragraph.text for paragraph in section.header.paragraphs)
    return '\n'.join(texts)


class TemplateDirMixin:

    def setUp(self):
        super().setUp()
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)
        super().tearDown()

    def make_template(self, paragraphs=(), table_cells=(), header=None):
        document = Document()
        for text in paragraphs:
            document.add_paragraph(text)
        if table_cells:
            table = document.add_table(rows=1, cols=len(table_cells))
            for cell, text in zip(table.rows[0].cells, table_cells):
                cell.text = text
        if header is not None:
            section_header = document.sections[0].header
            section_header.is_linked_to_previous = False
            section_header.paragraphs[0].text = header
        path = os.path.join(self.temp_dir, 'template.docx')
        document.save(path)
        return path


class WordGeneratorTests(TemplateDirMixin, SimpleTestCase):

    def test_placeholders_are_filled(self):
        path = self.make_template(
            paragraphs=['Inmueble: {{titulo}}', 'Precio: {{ montoTexto }}'],
            table_cells=['{{propietario1Nombre}}', '{{propietario1Dni}}'],
        )

        buffer = MandateWordGenerator(template_path=path).render({
            'titulo': 'Casa en Palermo',
            'montoTexto': 'PESOS ARGENTINOS NOVENTA MIL (ARS 90.000)',
            'propietario1Nombre': 'Ana Gómez',
            'propietario1Dni': '12345678',
        })
        text = document_text(buffer)

        self.assertIn('Inmueble: Casa en Palermo', text)
        self.assertIn('Precio: PESOS ARGENTINOS NOVENTA MIL (ARS 90.000)', text)
        self.assertIn('Ana Gómez', text)
        self.assertIn('12345678', text)
        self.assertNotIn('{{', text)

    def test_missing_placeholder_renders_empty(self):
        path = self.make_template(paragraphs=['Obs: [{{observaciones}}] [{{campoInexistente}}]'])

        buffer = MandateWordGenerator(template_path=path).render({'observaciones': ''})

        self.assertIn('Obs: [] []', document_text(buffer))

    def test_special_characters_are_escaped(self):
        path = self.make_template(paragraphs=['{{titulo}}'])

        buffer = MandateWordGenerator(template_path=path).render({'titulo': 'Lote <A> & "B"'})

        self.assertIn('Lote <A> & "B"', document_text(buffer))

    def test_header_placeholders_are_filled(self):
        path = self.make_template(paragraphs=['Cuerpo'], header='Expediente {{titulo}}')

        buffer = MandateWordGenerator(template_path=path).render({'titulo': 'Casa'})

        self.assertIn('Expediente Casa', document_text(buffer))

    def test_missing_template_raises(self):
        generator = MandateWordGenerator(template_path=os.path.join(self.temp_dir, 'missing.docx'))

        with self.assertLogs('mandates.generators', level='ERROR'):
            with self.assertRaises(TemplateMissingError) as cm:
                generator.render({})

        self.assertEqual(cm.exception.status_code, 500)
        self.assertEqual(cm.exception.message, 'Plantilla de mandato no encontrada')
        self.assertIn('missing.docx', cm.exception.details)

    def test_all_malformed_tags_are_reported(self):
        path = self.make_template(
            paragraphs=['Título {{titulo', 'Vacía {{ }}', 'Cierre suelto }}', 'Expresión {{ 1 + }}'],
            table_cells=['{{ }}'],
        )

        with self.assertLogs('mandates.generators', level='ERROR'):
            with self.assertRaises(TemplateRenderError) as cm:
                MandateWordGenerator(template_path=path).render({'titulo': 'Casa'})

        errors = cm.exception.errors
        self.assertEqual(len(errors), 5)
        self.assertEqual(errors[0].location, 'párrafo 1')
        self.assertIn('{{titulo', errors[0].tag)
        self.assertEqual(errors[1].message, 'Etiqueta vacía')
        self.assertTrue(errors[4].location.startswith('tabla 1'))

        data = cm.exception.as_response_data()
        self.assertEqual(len(data['errores']), 5)
        self.assertEqual(set(data['errores'][0]), {'etiqueta', 'mensaje', 'ubicacion'})
        self.assertIn('sugerencia', data)

    def test_valid_template_has_no_errors(self):
        path = self.make_template(paragraphs=['{{titulo}} {{ r asesorNombre }}', 'Sin etiquetas'])

        self.assertEqual(MandateWordGenerator(template_path=path).validate_template(), [])

    def test_template_path_defaults_to_settings(self):
        generator = MandateWordGenerator()

        self.assertEqual(generator.template_path, str(settings.MANDATE_TEMPLATE_PATH))


class ShippedTemplateTests(TestCase):

    def setUp(self):
        advisor = get_user_model().objects.create_user(
            email='advisor@example.com',
            password='testpass123',
            name='Laura Díaz',
        )
        self.property = Property.objects.create(
            title='Casa en Palermo',
            owner_name='Ana Gómez',
            property_type='Casa',
            address='Av. Santa Fe 1234',
            locality='CABA',
            owners='[{"nombreCompleto": "Ana Gómez", "dni": "12345678"}]',
            state=Property.STATE_APPROVED,
            advisor=advisor,
        )
        self.mandate = Mandate.objects.create(
            property_record=self.property,
            term_days=90,
            amount=Decimal('90000'),
        )

    def test_shipped_template_is_valid(self):
        self.assertTrue(os.path.exists(settings.MANDATE_TEMPLATE_PATH))
        self.assertEqual(MandateWordGenerator().validate_template(), [])

    def test_shipped_template_renders_every_tag(self):
        data = build_template_data(self.property, self.mandate, now=NOW)
        self.assertEqual(set(data), set(TEMPLATE_KEYS))

        text = document_text(MandateWordGenerator().render(data))

        self.assertNotIn('{{', text)
        self.assertIn('PESOS ARGENTINOS NOVENTA MIL (ARS 90.000)', text)
        self.assertIn('Tres (3) meses', text)
        self.assertIn('Ana Gómez', text)
        self.assertIn('Laura Díaz', text)


class PdfGeneratorTests(TestCase):

    def setUp(self):
        self.advisor = get_user_model().objects.create_user(
            email='advisor@example.com',
            password='testpass123',
            name='Laura Díaz',
        )
        self.property = Property.objects.create(
            title='Casa <Palermo> & Co',
            owner_name='',
            owners='[{"nombreCompleto": "Ana Gómez"}]',
            description='Tres ambientes',
            state=Property.STATE_APPROVED,
            advisor=self.advisor,
        )
        self.mandate = Mandate.objects.create(
            property_record=self.property,
            term_days=45,
            amount=Decimal('200000'),
            currency='USD',
            notes='Con cochera',
        )

    def test_render_pdf(self):
        buffer = MandatePdfGenerator().render(self.property, self.mandate, now=NOW)

        content = buffer.getvalue()
        self.assertTrue(content.startswith(b'%PDF'))
        self.assertEqual(buffer.tell(), 0)

    def test_render_signed_mandate_pdf(self):
        self.mandate.mark_state(Mandate.STATE_SIGNED, signed_by='Ana Gómez')

        buffer = MandatePdfGenerator(company_name='Inmobiliaria Test').render(self.property, self.mandate)

        self.assertTrue(buffer.getvalue().startswith(b'%PDF'))
