# properties/views.py

import logging

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiTypes, OpenApiExample
from rest_framework import status, permissions
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from .permissions import IsAdminRole, scoped_properties
from .serializers import PropertySerializer, PropertyStateSerializer

logger = logging.getLogger(__name__)

PROPERTY_ID_PARAMETER = OpenApiParameter(
    name="property_id",
    type=OpenApiTypes.INT,
    location=OpenApiParameter.PATH,
    description="Property ID"
)


@extend_schema(
    methods=['GET'],
    summary="List properties",
    description="Advisors get their own properties; reviewers and admins get every property",
    tags=["properties"],
    responses={200: PropertySerializer(many=True)}
)
@extend_schema(
    methods=['POST'],
    summary="Create a property",
    description="Registers a property case for the authenticated advisor. The property starts PENDIENTE.",
    tags=["properties"],
    request=PropertySerializer,
    examples=[
        OpenApiExample(
            name="Create property",
            value={
                "title": "Casa en Palermo",
                "owner_name": "Ana Gómez",
                "property_type": "Casa",
                "address": "Av. Santa Fe 1234",
                "cadastral_reference": "123-456",
                "locality": "CABA",
                "owners": [{"nombreCompleto": "Ana Gómez", "dni": "12345678"}]
            },
            request_only=True
        )
    ],
    responses={201: PropertySerializer, 400: OpenApiTypes.OBJECT}
)
@api_view(['GET', 'POST'])
@authentication_classes([JWTAuthentication])
@permission_classes([permissions.IsAuthenticated])
def property_list_create(request):
    """List visible properties or create a new one"""
    if request.method == 'GET':
        serializer = PropertySerializer(scoped_properties(request.user), many=True)
        return Response(serializer.data)

    serializer = PropertySerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    property_record = serializer.save(advisor=request.user)
    logger.info(f"Property {property_record.id} created by {request.user.email}")
    return Response(PropertySerializer(property_record).data, status=status.HTTP_201_CREATED)


@extend_schema(
    summary="Get a property",
    tags=["properties"],
    parameters=[PROPERTY_ID_PARAMETER],
    responses={200: PropertySerializer, 404: OpenApiTypes.OBJECT}
)
@api_view(['GET'])
@authentication_classes([JWTAuthentication])
@permission_classes([permissions.IsAuthenticated])
def property_detail(request, property_id):
    """Property detail, including a summary of its mandate"""
    property_record = get_object_or_404(scoped_properties(request.user), id=property_id)
    return Response(PropertySerializer(property_record).data)


@extend_schema(
    summary="Change the approval state of a property",
    description="ADMIN only. Rejecting requires review notes; approving clears previous notes.",
    tags=["properties"],
    parameters=[PROPERTY_ID_PARAMETER],
    request=PropertyStateSerializer,
    examples=[
        OpenApiExample(
            name="Reject property",
            value={"state": "RECHAZADO", "review_notes": "Falta la escritura"},
            request_only=True
        )
    ],
    responses={200: PropertySerializer, 400: OpenApiTypes.OBJECT, 403: OpenApiTypes.OBJECT,
               404: OpenApiTypes.OBJECT}
)
@api_view(['PUT'])
@authentication_classes([JWTAuthentication])
@permission_classes([IsAdminRole])
def change_property_state(request, property_id):
    """Approve, reject or send back a property"""
    property_record = get_object_or_404(scoped_properties(request.user), id=property_id)

    serializer = PropertyStateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    serializer.apply(property_record)
    logger.info(f"Property {property_record.id} moved to {property_record.state} by {request.user.email}")
    return Response(PropertySerializer(property_record).data)
