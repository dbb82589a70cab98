"""
Text-to-speech via the Google Cloud Text-to-Speech REST API.
Tries the premium voice first and falls back to the standard voice once.
"""

import logging
from typing import List, Optional

from .constants import SPEECH_AUDIO_ENCODING, SPEECH_LANGUAGE_CODE, TTS_SYNTHESIZE_URL
from .errors import ConfigurationError, SynthesisFailedError, UpstreamUnavailable
from .http_client import REQUEST_TIMEOUT, ProviderHttpClient
from .models import SynthesisResult, VoiceProfile

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def default_voice_profiles(premium_voice: str, standard_voice: str) -> List[VoiceProfile]:
    """Premium neural voice tuned slightly brighter, then the plain standard voice."""
    return [
        VoiceProfile(
            name=premium_voice,
            language_code=SPEECH_LANGUAGE_CODE,
            speaking_rate=1.05,
            pitch=0.5,
            volume_gain_db=1.0,
        ),
        VoiceProfile(
            name=standard_voice,
            language_code=SPEECH_LANGUAGE_CODE,
            speaking_rate=1.0,
            pitch=0.0,
            volume_gain_db=0.0,
        ),
    ]


def build_synthesis_request(text: str, voice: VoiceProfile) -> dict:
    return {
        "input": {"text": text},
        "voice": {"languageCode": voice.language_code, "name": voice.name},
        "audioConfig": {
            "audioEncoding": SPEECH_AUDIO_ENCODING,
            "speakingRate": voice.speaking_rate,
            "pitch": voice.pitch,
            "volumeGainDb": voice.volume_gain_db,
        },
    }


class SpeechSynthesizer:
    def __init__(
        self,
        api_key: str | None,
        voices: List[VoiceProfile],
        http: ProviderHttpClient | None = None,
        timeout: tuple[float, float] = REQUEST_TIMEOUT,
    ):
        if not api_key:
            raise ConfigurationError("TTS API key is not configured: set GOOGLE_TTS_API_KEY")
        self.api_key = api_key
        self.voices = voices
        self.http = http or ProviderHttpClient.build("google_tts", timeout)

    def _synthesize_with(self, text: str, voice: VoiceProfile) -> str:
        resp = self.http.post_json(
            TTS_SYNTHESIZE_URL,
            body=build_synthesis_request(text, voice),
            params={"key": self.api_key},
        )
        try:
            audio = resp.json().get("audioContent")
        except (ValueError, AttributeError) as e:
            raise UpstreamUnavailable("TTS returned invalid JSON", provider="google_tts") from e
        if not audio:
            raise UpstreamUnavailable("TTS response has no audioContent", provider="google_tts")
        return audio

    def synthesize(self, text: str) -> SynthesisResult:
        """
        Synthesize text, walking the voice tiers in order.

        Returns:
            Base64 audio and the voice that produced it

        Raises:
            SynthesisFailedError if every tier is rejected
        """
        last_error: Optional[UpstreamUnavailable] = None
        for voice in self.voices:
            try:
                audio = self._synthesize_with(text, voice)
            except UpstreamUnavailable as e:
                logger.warning(
                    "Voice %s rejected (status=%s): %s",
                    voice.name,
                    e.upstream_status,
                    e.message,
                )
                last_error = e
                continue

            logger.info("Synthesized %d chars with %s", len(text), voice.name)
            return SynthesisResult(audio_content=audio, voice_used=voice.name)

        raise SynthesisFailedError(
            "Speech synthesis failed for all voices",
            provider_message=last_error.message if last_error else None,
        )
