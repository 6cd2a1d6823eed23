import pytest
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def _plain_http(settings):
    # test client berbicara http biasa
    settings.SECURE_SSL_REDIRECT = False


@pytest.fixture
def amil(django_user_model):
    return django_user_model.objects.create_user(username="amil", password="amil-pass-123")


@pytest.fixture
def api_client(amil):
    client = APIClient()
    client.force_authenticate(user=amil)
    return client


@pytest.fixture
def anon_client():
    return APIClient()
