from unittest.mock import patch

from api.diagnostics import diagnostics, feature_flags
from api.tests.conftest import call_endpoint


def test_feature_flags_report_presence_only():
    flags = feature_flags({"GEMINI_API_KEY": "secret", "Google_Search_API_KEY": "legacy"})

    assert flags.GEMINI_API_KEY is True
    assert flags.GOOGLE_SEARCH_API_KEY is True
    assert flags.GCP_SERVICE_ACCOUNT_JSON is False
    assert "secret" not in flags.model_dump_json()


@patch("api.diagnostics.feature_flags")
def test_post_echoes_prompt(mock_flags):
    mock_flags.return_value = feature_flags({"OPENWEATHER_API_KEY": "w"})

    body, status, _ = call_endpoint(diagnostics, json_body={"prompt": "Merhaba"})

    assert status == 200
    assert body["success"] is True
    assert body["message"] == "Diagnostics endpoint working"
    assert body["data"]["receivedPrompt"] == "Merhaba"
    assert body["data"]["method"] == "POST"
    assert body["data"]["environmentVariables"]["OPENWEATHER_API_KEY"] is True
    assert body["data"]["environmentVariables"]["GOOGLE_TTS_API_KEY"] is False


@patch("api.diagnostics.feature_flags")
def test_get_is_alive(mock_flags):
    mock_flags.return_value = feature_flags({})

    body, status, _ = call_endpoint(diagnostics, method="GET")

    assert status == 200
    assert body["message"] == "Diagnostics endpoint is alive"
    assert "receivedPrompt" not in body["data"]
    assert body["data"]["pythonVersion"]


def test_other_methods_rejected():
    body, status, _ = call_endpoint(diagnostics, method="DELETE")
    assert status == 405
    assert body == {"error": "Only GET, POST allowed"}


@patch("api.diagnostics.feature_flags")
def test_unexpected_error_is_opaque(mock_flags):
    mock_flags.side_effect = RuntimeError("secret internals")

    body, status, _ = call_endpoint(diagnostics, method="GET")

    assert status == 500
    assert body == {"error": "Internal server error"}
