"""
Tests for two-tier speech synthesis.
"""
import json

import pytest
import requests
import responses

from api.constants import TTS_SYNTHESIZE_URL
from api.errors import ConfigurationError, SynthesisFailedError
from api.speech import SpeechSynthesizer, build_synthesis_request, default_voice_profiles


@pytest.fixture
def synthesizer():
    return SpeechSynthesizer("tts-key", default_voice_profiles("tr-TR-Wavenet-E", "tr-TR-Standard-A"))


def _body(call_index):
    return json.loads(responses.calls[call_index].request.body)


def test_missing_api_key():
    with pytest.raises(ConfigurationError) as exc_info:
        SpeechSynthesizer("", default_voice_profiles("a", "b"))
    assert "GOOGLE_TTS_API_KEY" in exc_info.value.message


def test_request_body_shape():
    premium = default_voice_profiles("tr-TR-Wavenet-E", "tr-TR-Standard-A")[0]
    body = build_synthesis_request("Merhaba", premium)
    assert body == {
        "input": {"text": "Merhaba"},
        "voice": {"languageCode": "tr-TR", "name": "tr-TR-Wavenet-E"},
        "audioConfig": {
            "audioEncoding": "MP3",
            "speakingRate": 1.05,
            "pitch": 0.5,
            "volumeGainDb": 1.0,
        },
    }


@responses.activate
def test_premium_voice_used_first(synthesizer):
    responses.add(responses.POST, TTS_SYNTHESIZE_URL, json={"audioContent": "UFJFTUlVTQ=="})

    result = synthesizer.synthesize("Merhaba")

    assert result.voice_used == "tr-TR-Wavenet-E"
    assert result.audio_content == "UFJFTUlVTQ=="
    assert len(responses.calls) == 1
    assert "key=tts-key" in responses.calls[0].request.url


@responses.activate
def test_falls_back_to_standard_voice(synthesizer):
    responses.add(
        responses.POST,
        TTS_SYNTHESIZE_URL,
        json={"error": {"code": 400, "message": "Voice does not exist"}},
        status=400,
    )
    responses.add(responses.POST, TTS_SYNTHESIZE_URL, json={"audioContent": "U1RBTkRBUkQ="})

    result = synthesizer.synthesize("Merhaba")

    assert result.voice_used == "tr-TR-Standard-A"
    assert result.audio_content == "U1RBTkRBUkQ="
    assert _body(0)["voice"]["name"] == "tr-TR-Wavenet-E"
    assert _body(1)["voice"]["name"] == "tr-TR-Standard-A"
    assert _body(1)["audioConfig"]["speakingRate"] == 1.0
    assert _body(1)["audioConfig"]["pitch"] == 0.0


@responses.activate
def test_missing_audio_content_falls_through(synthesizer):
    responses.add(responses.POST, TTS_SYNTHESIZE_URL, json={})
    responses.add(responses.POST, TTS_SYNTHESIZE_URL, json={"audioContent": "QUJD"})

    assert synthesizer.synthesize("Merhaba").voice_used == "tr-TR-Standard-A"


@responses.activate
def test_both_tiers_fail(synthesizer):
    responses.add(
        responses.POST,
        TTS_SYNTHESIZE_URL,
        json={"error": {"code": 403, "message": "API key not valid"}},
        status=403,
    )

    with pytest.raises(SynthesisFailedError) as exc_info:
        synthesizer.synthesize("Merhaba")

    assert exc_info.value.details == "API key not valid"
    assert len(responses.calls) == 2


@responses.activate
def test_network_error_on_both_tiers(synthesizer):
    responses.add(responses.POST, TTS_SYNTHESIZE_URL, body=requests.exceptions.ConnectionError("down"))

    with pytest.raises(SynthesisFailedError) as exc_info:
        synthesizer.synthesize("Merhaba")

    assert "tts-key" not in (exc_info.value.details or "")
