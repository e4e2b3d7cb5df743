import pytest
import requests
from notifications.channel import (
    FAKE,
    WHATSAPP,
    configured_channel,
    get_channel,
    reset_channels,
)
from notifications.channel.fake_whatsapp import FakeWhatsAppAdapter
from notifications.channel.whatsapp_cloud import (
    DEFAULT_API_URL,
    WhatsAppCloudAdapter,
    normalize_number,
)


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body or {}

    def json(self):
        return self._body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")


class RecordingSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(body={"messages": [{"id": "wamid.ABC"}]})
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


class TestChannelRegistry:
    def test_fake_is_default(self, monkeypatch):
        monkeypatch.delenv("NOTIFICATION_CHANNEL", raising=False)
        assert configured_channel() == FAKE
        assert isinstance(get_channel(), FakeWhatsAppAdapter)

    def test_singleton_per_type(self):
        assert get_channel(FAKE) is get_channel(FAKE)

    def test_reset_creates_fresh_adapter(self):
        first = get_channel(FAKE)
        reset_channels()
        assert get_channel(FAKE) is not first

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown channel type"):
            get_channel("pigeon")

    def test_whatsapp_channel_from_env(self, monkeypatch):
        monkeypatch.setenv("WHATSAPP_PHONE_NUMBER_ID", "1234")
        monkeypatch.setenv("WHATSAPP_ACCESS_TOKEN", "secret")
        adapter = get_channel(WHATSAPP)
        assert isinstance(adapter, WhatsAppCloudAdapter)
        assert adapter.api_url == DEFAULT_API_URL


class TestFakeWhatsApp:
    def test_records_sent_messages(self):
        adapter = FakeWhatsAppAdapter()
        result = adapter.send("92993312208", "Olá")
        assert result["status"] == "sent"
        assert result["message_id"].startswith("wamid-")
        assert adapter.sent_messages == [{"message_id": result["message_id"], "to": "92993312208", "body": "Olá"}]

    def test_configured_failure(self):
        adapter = FakeWhatsAppAdapter()
        adapter.configure(should_succeed=False, failure_reason="número bloqueado")
        result = adapter.send("92993312208", "Olá")
        assert result == {"message_id": None, "status": "failed", "error": "número bloqueado"}
        assert adapter.sent_messages == []

        adapter.reset()
        assert adapter.send("92993312208", "Olá")["status"] == "sent"


class TestNormalizeNumber:
    @pytest.mark.parametrize(
        "number,expected",
        [
            ("(92) 99331-2208", "5592993312208"),
            ("(92) 3331-2208", "559233312208"),
            ("+55 92 99331-2208", "5592993312208"),
        ],
    )
    def test_local_numbers_get_country_code(self, number, expected):
        assert normalize_number(number) == expected


class TestWhatsAppCloudAdapter:
    def test_posts_text_message(self):
        session = RecordingSession()
        adapter = WhatsAppCloudAdapter("1234", "secret", api_url="https://graph.test/v1/", session=session)

        result = adapter.send("(92) 99331-2208", "Seu pedido está pronto")

        assert result == {"message_id": "wamid.ABC", "status": "sent"}
        url, kwargs = session.calls[0]
        assert url == "https://graph.test/v1/1234/messages"
        assert kwargs["headers"] == {"Authorization": "Bearer secret"}
        assert kwargs["json"]["to"] == "5592993312208"
        assert kwargs["json"]["text"] == {"body": "Seu pedido está pronto"}

    def test_http_error_is_a_failed_result(self):
        adapter = WhatsAppCloudAdapter("1234", "secret", session=RecordingSession(FakeResponse(401)))
        result = adapter.send("92993312208", "Olá")
        assert result["status"] == "failed"
        assert "401" in result["error"]

    def test_connection_error_is_a_failed_result(self):
        session = RecordingSession(error=requests.ConnectionError("refused"))
        result = WhatsAppCloudAdapter("1234", "secret", session=session).send("92993312208", "Olá")
        assert result["status"] == "failed"

    def test_from_env_requires_credentials(self, monkeypatch):
        monkeypatch.delenv("WHATSAPP_PHONE_NUMBER_ID", raising=False)
        monkeypatch.delenv("WHATSAPP_ACCESS_TOKEN", raising=False)
        with pytest.raises(ValueError):
            WhatsAppCloudAdapter.from_env()
