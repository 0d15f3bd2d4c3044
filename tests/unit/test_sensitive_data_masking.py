import pytest

from config.settings import mask_sensitive_data

pytestmark = pytest.mark.unit

SERVICE_ROLE_JWT = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9"
    ".eyJyb2xlIjoic2VydmljZV9yb2xlIn0"
    ".c2lnbmF0dXJlLXZhbHVl"
)


class TestSensitiveDataMasking:
    def test_jwt_masked(self):
        event_dict = {"event": "test", "detail": f"Bearer {SERVICE_ROLE_JWT}"}
        result = mask_sensitive_data(None, None, event_dict)
        assert SERVICE_ROLE_JWT not in result["detail"]
        assert "***MASKED***" in result["detail"]

    def test_password_masked(self):
        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked(self):
        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_apikey_masked(self):
        event_dict = {"event": "test", "url": "https://x.supabase.co/rest/v1/products?apikey=abc123"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123" not in result["url"]

    def test_non_sensitive_data_unchanged(self):
        event_dict = {"event": "product.created", "slug": "cana-pictata"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["slug"] == "cana-pictata"
        assert result["event"] == "product.created"
