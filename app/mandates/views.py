# mandates/views.py

import logging

from django.db import IntegrityError, transaction
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiTypes, OpenApiExample
from rest_framework import status, permissions
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from core.models import Mandate
from properties.permissions import IsAdminRole, scoped_properties
from .exceptions import MandateDocumentError
from .serializers import MandateSerializer, MandateStateSerializer
from .services import MandateDocumentService, DOCX_CONTENT_TYPE, PDF_CONTENT_TYPE

logger = logging.getLogger(__name__)

PROPERTY_ID_PARAMETER = OpenApiParameter(
    name="property_id",
    type=OpenApiTypes.INT,
    location=OpenApiParameter.PATH,
    description="Property ID"
)


def _document_error_response(error, property_id):
    """JSON body for a generation failure; nothing has been written yet"""
    if error.status_code >= 500:
        logger.error(f"Mandate generation failed for property {property_id}: {error.message} - {error.details}")
    else:
        logger.warning(f"Mandate generation refused for property {property_id}: {error.message}")
    return Response(error.as_response_data(), status=error.status_code)


@extend_schema(
    methods=['GET'],
    summary="Get the mandate of a property",
    tags=["mandates"],
    parameters=[PROPERTY_ID_PARAMETER],
    responses={200: MandateSerializer, 404: OpenApiTypes.OBJECT}
)
@extend_schema(
    methods=['POST'],
    summary="Create the mandate of an approved property",
    description="The property must be APROBADO and must not have a mandate yet. The mandate starts as BORRADOR.",
    tags=["mandates"],
    parameters=[PROPERTY_ID_PARAMETER],
    request=MandateSerializer,
    examples=[
        OpenApiExample(
            name="Create mandate",
            value={"term_days": 90, "amount": 90000, "currency": "ARS", "notes": "Exclusividad"},
            request_only=True
        )
    ],
    responses={201: MandateSerializer, 400: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT}
)
@api_view(['GET', 'POST'])
@authentication_classes([JWTAuthentication])
@permission_classes([permissions.IsAuthenticated])
def property_mandate(request, property_id):
    """Read or create the mandate attached to a property"""
    property_record = get_object_or_404(scoped_properties(request.user), id=property_id)

    if request.method == 'GET':
        mandate = property_record.get_mandate()
        if mandate is None:
            return Response(
                {'error': 'Este expediente no tiene mandato asociado'},
                status=status.HTTP_404_NOT_FOUND
            )
        return Response(MandateSerializer(mandate).data)

    serializer = MandateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    if not property_record.is_approved:
        return Response(
            {
                'error': 'Solo se puede crear un mandato para expedientes APROBADOS',
                'estadoActual': property_record.state
            },
            status=status.HTTP_400_BAD_REQUEST
        )

    existing = property_record.get_mandate()
    if existing is not None:
        return Response(
            {
                'error': 'Este expediente ya tiene un mandato asociado',
                'mandatoExistente': {'id': existing.id, 'estado': existing.state}
            },
            status=status.HTTP_400_BAD_REQUEST
        )

    try:
        with transaction.atomic():
            mandate = serializer.save(property_record=property_record)
    except IntegrityError:
        return Response(
            {'error': 'Este expediente ya tiene un mandato asociado'},
            status=status.HTTP_400_BAD_REQUEST
        )

    logger.info(f"Mandate {mandate.id} created for property {property_record.id}")
    return Response(MandateSerializer(mandate).data, status=status.HTTP_201_CREATED)


@extend_schema(
    summary="Change the state of a mandate",
    description="ADMIN only. Moving to FIRMADO stamps the signature date and stores the signer name.",
    tags=["mandates"],
    parameters=[
        OpenApiParameter(
            name="mandate_id",
            type=OpenApiTypes.INT,
            location=OpenApiParameter.PATH,
            description="Mandate ID"
        )
    ],
    request=MandateStateSerializer,
    examples=[
        OpenApiExample(
            name="Sign mandate",
            value={"state": "FIRMADO", "signed_by": "Ana Gómez"},
            request_only=True
        )
    ],
    responses={200: MandateSerializer, 400: OpenApiTypes.OBJECT, 403: OpenApiTypes.OBJECT,
               404: OpenApiTypes.OBJECT}
)
@api_view(['PUT'])
@authentication_classes([JWTAuthentication])
@permission_classes([IsAdminRole])
def change_mandate_state(request, mandate_id):
    """Move a mandate through BORRADOR / ENVIADO / FIRMADO / ANULADO"""
    mandate = get_object_or_404(Mandate, id=mandate_id)

    serializer = MandateStateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    mandate.mark_state(
        serializer.validated_data['state'],
        signed_by=serializer.validated_data.get('signed_by'),
        document_url=serializer.validated_data.get('document_url'),
    )
    logger.info(f"Mandate {mandate.id} moved to {mandate.state} by {request.user.email}")
    return Response(MandateSerializer(mandate).data)


@extend_schema(
    summary="Download the mandate PDF",
    description="Generates the mandate summary PDF on-the-fly",
    tags=["mandates"],
    parameters=[PROPERTY_ID_PARAMETER],
    responses={
        200: OpenApiTypes.BINARY,
        404: OpenApiTypes.OBJECT,
        500: OpenApiTypes.OBJECT
    }
)
@api_view(['GET'])
@authentication_classes([JWTAuthentication])
@permission_classes([permissions.IsAuthenticated])
def download_mandate_pdf(request, property_id):
    """Generate and download the mandate PDF"""
    property_record = get_object_or_404(scoped_properties(request.user), id=property_id)

    try:
        buffer, filename = MandateDocumentService.generate_pdf(property_record)
    except MandateDocumentError as e:
        return _document_error_response(e, property_id)
    except Exception as e:
        logger.exception(f"Error generating mandate PDF for property {property_id}")
        return Response(
            {
                'error': 'Error interno del servidor al generar el PDF del mandato',
                'detalles': str(e)
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return MandateDocumentService.build_response(buffer, filename, PDF_CONTENT_TYPE)


@extend_schema(
    summary="Download the filled mandate Word document",
    description="Fills the sales mandate template with the property, mandate and owner data. "
                "The property must be APROBADO and have a mandate.",
    tags=["mandates"],
    parameters=[PROPERTY_ID_PARAMETER],
    responses={
        200: OpenApiTypes.BINARY,
        400: OpenApiTypes.OBJECT,
        404: OpenApiTypes.OBJECT,
        500: OpenApiTypes.OBJECT
    }
)
@api_view(['GET'])
@authentication_classes([JWTAuthentication])
@permission_classes([permissions.IsAuthenticated])
def download_mandate_word(request, property_id):
    """Generate and download the mandate Word document"""
    property_record = get_object_or_404(scoped_properties(request.user), id=property_id)

    try:
        buffer, filename = MandateDocumentService.generate_word(property_record)
    except MandateDocumentError as e:
        return _document_error_response(e, property_id)
    except Exception as e:
        logger.exception(f"Error generating mandate Word document for property {property_id}")
        return Response(
            {
                'error': 'Error interno al generar el mandato',
                'detalles': str(e)
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return MandateDocumentService.build_response(buffer, filename, DOCX_CONTENT_TYPE)
