import pytest
import requests
from datetime import date
from unittest.mock import Mock
from uuid import uuid4

from rest_framework.test import APIClient
from rest_framework import status

from apps.exchange.infrastructure.persistence.models import CurrencyExchangeRate
from apps.transactions.infrastructure.persistence.models import Purchase as PurchaseModel


@pytest.fixture
def api_client():
    """DRF API client."""
    return APIClient()


@pytest.fixture
def treasury_settings(settings):
    settings.EXCHANGE_RATE_PROVIDER = "treasury"
    settings.BASE_CURRENCY = "USD"
    return settings


@pytest.fixture
def mock_requests_get(mocker):
    return mocker.patch("requests.get")


def treasury_response(records):
    response = Mock()
    response.json.return_value = {"data": records}
    response.raise_for_status.return_value = None
    return response


def create_purchase(client, description="Laptop", purchase_date="2024-01-20", amount="100.00"):
    return client.post(
        "/api/v1/transactions/",
        {"description": description, "date": purchase_date, "amount": amount},
        format="json",
    )


@pytest.mark.django_db(transaction=True)
class TestTransactionViewSet:
    """Tests for the transaction endpoints."""

    def setup_method(self):
        """Clean up before each test."""
        PurchaseModel.objects.all().delete()
        CurrencyExchangeRate.objects.all().delete()

    def test_create_transaction(self, api_client):
        """
        Test POST /api/v1/transactions/ stores the purchase rounded to cents.
        """
        response = create_purchase(api_client, amount="19.995")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["description"] == "Laptop"
        assert response.data["date"] == "2024-01-20"
        assert response.data["amount"] == "20.00"
        assert PurchaseModel.objects.get(id=response.data["id"]).amount_minor_units == 2000

    def test_create_transaction_invalid_payload(self, api_client):
        response = create_purchase(api_client, description="x" * 51, amount="-1")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "validation_error"
        assert "description" in response.data["detail"]
        assert "amount" in response.data["detail"]
        assert PurchaseModel.objects.count() == 0

    def test_create_transaction_amount_rounding_to_zero(self, api_client):
        """
        Test an amount that rounds to zero cents is rejected by the domain.
        """
        response = create_purchase(api_client, amount="0.004")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "validation_error"

    @pytest.mark.parametrize("purchase_date", ["0001-01-01", "0001-03-01"])
    def test_create_transaction_date_too_early(self, api_client, purchase_date):
        """
        Test dates with no representable 6-month window are rejected.
        """
        response = create_purchase(api_client, purchase_date=purchase_date)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "validation_error"
        assert PurchaseModel.objects.count() == 0

    def test_create_transaction_amount_too_large(self, api_client):
        response = create_purchase(api_client, amount="1e20")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "validation_error"
        assert PurchaseModel.objects.count() == 0

    def test_retrieve_transaction(self, api_client):
        created = create_purchase(api_client).data

        response = api_client.get(f"/api/v1/transactions/{created['id']}/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data == created

    def test_retrieve_transaction_not_found(self, api_client):
        response = api_client.get(f"/api/v1/transactions/{uuid4()}/")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error"] == "not_found"

    def test_retrieve_transaction_invalid_id(self, api_client):
        response = api_client.get("/api/v1/transactions/not-a-uuid/")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "validation_error"

    def test_list_transactions_paginated(self, api_client):
        """
        Test GET /api/v1/transactions/ returns the page and its totals.
        """
        for day in ("2024-01-05", "2024-01-20", "2024-01-12"):
            create_purchase(api_client, description=day, purchase_date=day)

        response = api_client.get("/api/v1/transactions/", {"page": 1, "size": 2})

        assert response.status_code == status.HTTP_200_OK
        assert response.data["page"] == 1
        assert response.data["size"] == 2
        assert response.data["total"] == 3
        assert response.data["total_pages"] == 2
        assert [t["description"] for t in response.data["data"]] == ["2024-01-20", "2024-01-12"]

    def test_list_transactions_defaults(self, api_client):
        response = api_client.get("/api/v1/transactions/", {"page": "abc", "size": "500"})

        assert response.status_code == status.HTTP_200_OK
        assert response.data["page"] == 1
        assert response.data["size"] == 20
        assert response.data["total"] == 0
        assert response.data["total_pages"] == 0
        assert response.data["data"] == []


@pytest.mark.django_db(transaction=True)
class TestConvertTransaction:
    """Tests for POST /api/v1/transactions/{id}/convert/."""

    def setup_method(self):
        """Clean up before each test."""
        PurchaseModel.objects.all().delete()
        CurrencyExchangeRate.objects.all().delete()

    def test_convert_fetches_then_serves_from_local_store(
        self, api_client, treasury_settings, mock_requests_get
    ):
        """
        Test the first conversion hits Treasury and caches the rate,
        and the second is answered locally.
        """
        mock_requests_get.return_value = treasury_response([
            {"record_date": "2024-01-15", "exchange_rate": "5.2", "country_currency_desc": "Brazil-Real"},
        ])
        purchase_id = create_purchase(api_client).data["id"]

        first = api_client.post(
            f"/api/v1/transactions/{purchase_id}/convert/", {"target_currency": "brl"}, format="json"
        )
        second = api_client.post(
            f"/api/v1/transactions/{purchase_id}/convert/", {"target_currency": "BRL"}, format="json"
        )

        assert first.status_code == status.HTTP_200_OK
        assert first.data["target_currency"] == "BRL"
        assert first.data["converted_amount"] == "520.00"
        assert first.data["exchange_rate"] == "5.200000"
        assert first.data["effective_date"] == "2024-01-15"
        assert first.data["transaction"]["id"] == purchase_id
        assert second.status_code == status.HTTP_200_OK
        assert second.data["converted_amount"] == "520.00"
        mock_requests_get.assert_called_once()
        assert CurrencyExchangeRate.objects.count() == 1

    def test_convert_same_result_before_and_after_caching(
        self, api_client, treasury_settings, mock_requests_get
    ):
        """
        Test a rate published with more than six decimals converts the same
        when fetched and when read back from the local store.
        """
        mock_requests_get.return_value = treasury_response([
            {"record_date": "2024-01-15", "exchange_rate": "1.0000005", "country_currency_desc": "Brazil-Real"},
        ])
        purchase_id = create_purchase(api_client, amount="5000.00").data["id"]
        url = f"/api/v1/transactions/{purchase_id}/convert/"

        first = api_client.post(url, {"target_currency": "BRL"}, format="json")
        second = api_client.post(url, {"target_currency": "BRL"}, format="json")

        assert first.data["exchange_rate"] == "1.000001"
        assert first.data["converted_amount"] == "5000.01"
        assert second.data["exchange_rate"] == first.data["exchange_rate"]
        assert second.data["converted_amount"] == first.data["converted_amount"]
        mock_requests_get.assert_called_once()

    def test_convert_picks_most_recent_rate_in_window(
        self, api_client, treasury_settings, mock_requests_get
    ):
        mock_requests_get.return_value = treasury_response([
            {"record_date": "2023-12-31", "exchange_rate": "4.85", "country_currency_desc": "Brazil-Real"},
            {"record_date": "2023-09-30", "exchange_rate": "4.90", "country_currency_desc": "Brazil-Real"},
        ])
        purchase_id = create_purchase(api_client, amount="99.99").data["id"]

        response = api_client.post(
            f"/api/v1/transactions/{purchase_id}/convert/", {"target_currency": "BRL"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["effective_date"] == "2023-12-31"
        assert response.data["converted_amount"] == "484.95"

    def test_convert_no_suitable_rate(self, api_client, treasury_settings, mock_requests_get):
        mock_requests_get.return_value = treasury_response([])
        purchase_id = create_purchase(api_client).data["id"]

        response = api_client.post(
            f"/api/v1/transactions/{purchase_id}/convert/", {"target_currency": "BRL"}, format="json"
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.data["error"] == "no_suitable_rate"

    def test_convert_external_source_failure(self, api_client, treasury_settings, mock_requests_get):
        mock_requests_get.side_effect = requests.exceptions.Timeout("read timed out")
        purchase_id = create_purchase(api_client).data["id"]

        response = api_client.post(
            f"/api/v1/transactions/{purchase_id}/convert/", {"target_currency": "BRL"}, format="json"
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data["error"] == "external_source_error"

    def test_convert_to_base_currency(self, api_client, treasury_settings, mock_requests_get):
        purchase_id = create_purchase(api_client).data["id"]

        response = api_client.post(
            f"/api/v1/transactions/{purchase_id}/convert/", {"target_currency": "USD"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "invalid_conversion"
        mock_requests_get.assert_not_called()

    @pytest.mark.parametrize("payload", [{}, {"target_currency": "BR"}, {"target_currency": "B1L"}])
    def test_convert_invalid_currency(self, api_client, treasury_settings, mock_requests_get, payload):
        purchase_id = create_purchase(api_client).data["id"]

        response = api_client.post(f"/api/v1/transactions/{purchase_id}/convert/", payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "validation_error"
        mock_requests_get.assert_not_called()

    def test_convert_stored_year_one_purchase(self, api_client, treasury_settings, mock_requests_get):
        """
        Test a purchase stored outside the API with a year-1 date answers with a structured error.
        """
        row = PurchaseModel.objects.create(description="Legacy", date=date(1, 3, 1), amount_minor_units=1000)

        response = api_client.post(
            f"/api/v1/transactions/{row.id}/convert/", {"target_currency": "BRL"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "validation_error"
        mock_requests_get.assert_not_called()

    def test_convert_unknown_transaction(self, api_client, treasury_settings, mock_requests_get):
        response = api_client.post(
            f"/api/v1/transactions/{uuid4()}/convert/", {"target_currency": "BRL"}, format="json"
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error"] == "not_found"
        mock_requests_get.assert_not_called()

    def test_convert_with_mock_provider(self, api_client, settings):
        settings.EXCHANGE_RATE_PROVIDER = "mock"
        purchase_id = create_purchase(api_client).data["id"]

        response = api_client.post(
            f"/api/v1/transactions/{purchase_id}/convert/", {"target_currency": "EUR"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["effective_date"] == "2023-12-31"

    def test_convert_unknown_provider_is_configuration_error(self, api_client, settings):
        settings.EXCHANGE_RATE_PROVIDER = "nope"
        purchase_id = create_purchase(api_client).data["id"]

        response = api_client.post(
            f"/api/v1/transactions/{purchase_id}/convert/", {"target_currency": "EUR"}, format="json"
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data["error"] == "configuration_error"


@pytest.mark.django_db
def test_health(api_client):
    response = api_client.get("/health/")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "healthy"
