"""Portuguese narration of the daily reading using Google Cloud TTS."""

from __future__ import annotations

import io
import logging
import os
import re
import tempfile
from typing import TYPE_CHECKING

from google.cloud import texttospeech
from pydub import AudioSegment

from .config import get_data_dir
from .formatter import strip_markup
from .models import CorpusItem, DailyReading

if TYPE_CHECKING:
    from .config import Config

logger = logging.getLogger(__name__)

# Audio cache directory
AUDIO_CACHE_DIR = get_data_dir() / "cache" / "audio"

# Google Cloud TTS byte limit is 5000 per request; accented Portuguese
# stays well under it at 2500 chars.
MAX_CHUNK_CHARS = 2500

VOICE_NAME = "pt-BR-Wavenet-B"
LANGUAGE_CODE = "pt-BR"

SPEAKING_RATE = 1.0

# Silence between chunks (milliseconds)
INTER_CHUNK_SILENCE_MS = 300


def is_tts_enabled(config: Config | None) -> bool:
    """Check whether narration should be sent."""
    if config is None:
        return False
    return config.google_tts_enabled


def narration_text(item: CorpusItem) -> str:
    """Text read aloud for one paragraph."""
    return (
        f"{item.chapter_title}. Capítulo {item.chapter_number}, "
        f"parágrafo {item.paragraph_number}. {item.text} "
        f"Comentário devocional. {strip_markup(item.commentary)}"
    )


def cache_key(item: CorpusItem) -> str:
    return f"wcf_{item.chapter_number:02d}_{item.paragraph_number:02d}"


class PortugueseTTSClient:
    """Client for generating Portuguese audio using Google Cloud TTS."""

    def __init__(self, credentials_json: str | None = None):
        self._temp_creds_path: str | None = None

        if credentials_json:
            fd, path = tempfile.mkstemp(suffix=".json", prefix="gcloud_tts_")
            os.write(fd, credentials_json.encode())
            os.close(fd)
            self._temp_creds_path = path
            os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = path

        self.client = texttospeech.TextToSpeechClient()
        self.voice = texttospeech.VoiceSelectionParams(
            language_code=LANGUAGE_CODE,
            name=VOICE_NAME,
        )
        self.audio_config = texttospeech.AudioConfig(
            audio_encoding=texttospeech.AudioEncoding.OGG_OPUS,
            speaking_rate=SPEAKING_RATE,
        )

    def __del__(self) -> None:
        """Clean up temp credentials file."""
        if self._temp_creds_path and os.path.exists(self._temp_creds_path):
            os.unlink(self._temp_creds_path)

    def get_or_generate_audio(self, text: str, key: str) -> bytes | None:
        """Get audio from cache or generate it."""
        cache_path = AUDIO_CACHE_DIR / f"{key}.ogg"
        if cache_path.exists():
            logger.info(f"Audio cache hit: {key}")
            return cache_path.read_bytes()

        audio = self.synthesize_text(text)
        if audio:
            AUDIO_CACHE_DIR.mkdir(parents=True, exist_ok=True)
            cache_path.write_bytes(audio)
            logger.info(f"Cached audio: {key} ({len(audio)} bytes)")
        return audio

    def synthesize_text(self, text: str) -> bytes | None:
        """Synthesize text to OGG Opus audio."""
        try:
            chunks = chunk_text(text)
            logger.info(f"Synthesizing {len(chunks)} chunk(s), {len(text)} chars total")

            audio_chunks = [self._synthesize_chunk(chunk) for chunk in chunks]
            if len(audio_chunks) == 1:
                return audio_chunks[0]
            return _concatenate_audio(audio_chunks)

        except Exception:
            logger.exception("TTS synthesis failed")
            return None

    def _synthesize_chunk(self, chunk: str) -> bytes:
        synthesis_input = texttospeech.SynthesisInput(text=chunk)
        response = self.client.synthesize_speech(
            input=synthesis_input,
            voice=self.voice,
            audio_config=self.audio_config,
        )
        return response.audio_content


def chunk_text(text: str, max_chars: int = MAX_CHUNK_CHARS) -> list[str]:
    """Split text into chunks at sentence, then word, boundaries."""
    text = text.strip()
    if not text:
        return []
    if len(text) <= max_chars:
        return [text]

    sentences = re.split(r"(?<=[.;:!?])\s+", text)

    chunks: list[str] = []
    current = ""

    for sentence in sentences:
        candidate = f"{current} {sentence}".strip() if current else sentence
        if len(candidate) <= max_chars:
            current = candidate
            continue
        if current:
            chunks.append(current)
        if len(sentence) <= max_chars:
            current = sentence
            continue
        current = ""
        for word in sentence.split():
            candidate = f"{current} {word}".strip() if current else word
            if len(candidate) <= max_chars:
                current = candidate
            else:
                if current:
                    chunks.append(current)
                current = word

    if current:
        chunks.append(current)

    return chunks


def _concatenate_audio(audio_chunks: list[bytes]) -> bytes:
    """Concatenate OGG Opus audio chunks with silence gaps."""
    silence = AudioSegment.silent(duration=INTER_CHUNK_SILENCE_MS)
    combined = AudioSegment.empty()

    for i, chunk_bytes in enumerate(audio_chunks):
        segment = AudioSegment.from_ogg(io.BytesIO(chunk_bytes))
        if i > 0:
            combined += silence
        combined += segment

    buf = io.BytesIO()
    combined.export(buf, format="ogg", codec="libopus")
    return buf.getvalue()


async def send_voice_for_reading(
    bot: object,
    reading: DailyReading,
    chat_id: int | str,
    credentials_json: str | None = None,
    *,
    _tts_client: PortugueseTTSClient | None = None,
) -> None:
    """Generate and send narration for each paragraph of a reading.

    Never raises: narration failure is logged and skipped.
    """
    if not reading.items:
        return

    try:
        tts = _tts_client or PortugueseTTSClient(credentials_json)

        for item in reading.items:
            audio = tts.get_or_generate_audio(narration_text(item), cache_key(item))
            if not audio:
                logger.warning(f"TTS failed for {item.reference}, skipping voice")
                continue

            await bot.send_voice(  # type: ignore[attr-defined]
                chat_id=chat_id,
                voice=audio,
                caption=f"\U0001f509 {item.chapter_title} ({item.reference})",
                read_timeout=30,
                write_timeout=30,
            )
            logger.info(f"Voice message {item.reference} sent to {chat_id}")

    except Exception:
        logger.exception(f"Voice message delivery failed for {chat_id}")
