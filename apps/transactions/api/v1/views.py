"""
ViewSet for the transactions API v1.
Thin HTTP adapter over the application use cases.
"""

import logging

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from drf_spectacular.types import OpenApiTypes

from apps.exchange.domain.exceptions import DomainError
from apps.transactions.api.v1.serializers import (
    ConversionResultSerializer,
    ConvertPurchaseSerializer,
    CreatePurchaseSerializer,
    ErrorSerializer,
    PurchasePageSerializer,
    PurchaseSerializer,
)
from apps.transactions.application import factories
from apps.transactions.application.dto import (
    ConvertPurchaseRequestDTO,
    CreatePurchaseRequestDTO,
    ListPurchasesRequestDTO,
)
from apps.transactions.application.use_cases import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

logger = logging.getLogger(__name__)


def error_response(exc: DomainError) -> Response:
    return Response(exc.to_dict(), status=exc.status_code)


def invalid_request_response(errors) -> Response:
    return Response(
        {"error": "validation_error", "detail": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


def parse_query_int(raw, default: int, upper: int | None = None) -> int:
    """Malformed or out-of-range values fall back to the default."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    if value < 1 or (upper is not None and value > upper):
        return default
    return value


@extend_schema(tags=['Transactions'])
class TransactionViewSet(viewsets.ViewSet):

    lookup_value_regex = "[^/]+"

    @extend_schema(
        request=CreatePurchaseSerializer,
        responses={201: PurchaseSerializer, 400: ErrorSerializer},
        description="Record a purchase transaction in the base currency",
    )
    def create(self, request):
        serializer = CreatePurchaseSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request_response(serializer.errors)

        try:
            purchase = factories.build_create_purchase_use_case().execute(
                CreatePurchaseRequestDTO(**serializer.validated_data)
            )
        except DomainError as e:
            logger.warning("Failed to create transaction: %s", e)
            return error_response(e)

        return Response(PurchaseSerializer(purchase).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        responses={200: PurchaseSerializer, 400: ErrorSerializer, 404: ErrorSerializer},
        description="Retrieve a purchase transaction",
    )
    def retrieve(self, request, pk=None):
        try:
            purchase = factories.build_get_purchase_use_case().execute(pk)
        except DomainError as e:
            return error_response(e)

        return Response(PurchaseSerializer(purchase).data)

    @extend_schema(
        parameters=[
            OpenApiParameter("page", OpenApiTypes.INT, description=f"Page number (default {DEFAULT_PAGE})"),
            OpenApiParameter("size", OpenApiTypes.INT, description=f"Page size, 1-{MAX_PAGE_SIZE} (default {DEFAULT_PAGE_SIZE})"),
        ],
        responses={200: PurchasePageSerializer},
        description="List purchase transactions, newest first",
    )
    def list(self, request):
        page = parse_query_int(request.query_params.get('page'), DEFAULT_PAGE)
        size = parse_query_int(request.query_params.get('size'), DEFAULT_PAGE_SIZE, upper=MAX_PAGE_SIZE)

        try:
            result = factories.build_list_purchases_use_case().execute(
                ListPurchasesRequestDTO(page=page, size=size)
            )
        except DomainError as e:
            return error_response(e)

        return Response(PurchasePageSerializer(result).data)

    @extend_schema(
        request=ConvertPurchaseSerializer,
        responses={
            200: ConversionResultSerializer,
            400: ErrorSerializer,
            404: ErrorSerializer,
            422: OpenApiResponse(ErrorSerializer, description="No exchange rate within 6 months of the purchase"),
            500: ErrorSerializer,
        },
        description="Express a purchase in another currency using the rate valid on its date",
    )
    @action(detail=True, methods=['post'], url_path='convert')
    def convert(self, request, pk=None):
        serializer = ConvertPurchaseSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request_response(serializer.errors)

        target_currency = serializer.validated_data['target_currency']
        logger.info("Converting transaction %s to %s", pk, target_currency)

        try:
            result = factories.build_convert_purchase_use_case().execute(
                ConvertPurchaseRequestDTO(purchase_id=pk, target_currency=target_currency)
            )
        except DomainError as e:
            log = logger.error if e.status_code >= 500 else logger.warning
            log(
                "Failed to convert transaction %s to %s: [%s] %s",
                pk, target_currency, e.kind, e,
            )
            return error_response(e)

        return Response(ConversionResultSerializer(result).data)
