import pytest
import requests

from prefill_engine.config import Settings
from prefill_engine.exceptions import ParcelProviderError
from prefill_engine.sources import parcel_provider
from prefill_engine.sources.parcel_provider import get_property_data
from prefill_engine.sources.services import Client

PRINCIPAL_PATH = "/lookup/search/property/principal"
FINANCIAL_PATH = "/lookup/1234567890/property/financial"


def test_principal_and_financial_dataset(
    settings, fake_session, fake_response, principal_record, financial_dataset
):
    session = fake_session(
        {
            PRINCIPAL_PATH: fake_response(payload=[principal_record]),
            FINANCIAL_PATH: fake_response(payload=[financial_dataset]),
        }
    )

    property_data = get_property_data("4521 Peachtree Industrial Blvd", settings, Client(session))

    assert property_data["smarty_key"] == "1234567890"
    assert property_data["principal"]["attributes"]["building_sqft"] == "3,200"
    assert property_data["datasets"]["property_financial"] == financial_dataset

    url, kwargs = session.calls[0]
    assert url == f"{settings.smarty_base_url}{PRINCIPAL_PATH}"
    assert kwargs["params"]["freeform"] == "4521 Peachtree Industrial Blvd"
    assert kwargs["params"]["auth-id"] == "test-id"
    assert kwargs["params"]["auth-token"] == "test-token"
    assert kwargs["timeout"] == 30
    assert kwargs["headers"]["Accept"] == "application/json"


def test_missing_dataset_is_not_an_error(settings, fake_session, fake_response, principal_record):
    session = fake_session({PRINCIPAL_PATH: fake_response(payload=[principal_record])})

    property_data = get_property_data("4521 Peachtree Industrial Blvd", settings, Client(session))

    assert property_data["datasets"] == {}


@pytest.mark.parametrize("body", ["", "[]"])
def test_unmatched_address_returns_none(settings, fake_session, fake_response, body):
    session = fake_session({PRINCIPAL_PATH: fake_response(body=body)})

    assert get_property_data("1 Nowhere Rd", settings, Client(session)) is None
    assert len(session.calls) == 1


def test_bad_credentials_raise(settings, fake_session, fake_response):
    session = fake_session({PRINCIPAL_PATH: fake_response(status_code=401, reason="Unauthorized")})

    with pytest.raises(ParcelProviderError) as exc_info:
        get_property_data("4521 Peachtree Industrial Blvd", settings, Client(session))

    assert exc_info.value.status_code == 401
    assert "Invalid Smarty API credentials" in str(exc_info.value)


def test_server_error_raises(settings, fake_session, fake_response):
    session = fake_session(
        {PRINCIPAL_PATH: fake_response(status_code=503, reason="Service Unavailable")}
    )

    with pytest.raises(ParcelProviderError) as exc_info:
        get_property_data("4521 Peachtree Industrial Blvd", settings, Client(session))

    assert exc_info.value.status_code == 503


def test_transport_failure_raises(settings, fake_session):
    session = fake_session({PRINCIPAL_PATH: requests.ConnectionError("connection refused")})

    with pytest.raises(ParcelProviderError):
        get_property_data("4521 Peachtree Industrial Blvd", settings, Client(session))


def test_owned_client_is_closed(monkeypatch, fake_session, fake_response):
    session = fake_session({PRINCIPAL_PATH: fake_response(body="[]")})
    monkeypatch.setattr(parcel_provider, "Client", lambda: Client(session))

    assert get_property_data("1 Nowhere Rd", Settings()) is None
    assert session.closed is True
