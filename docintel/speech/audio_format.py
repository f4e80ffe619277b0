"""Audio encoding detection from magic bytes, falling back to MIME type and name."""

from docintel.speech.models import AudioFormat

FLAC = AudioFormat("FLAC", 44100)
OGG_OPUS = AudioFormat("OGG_OPUS", 48000)
LINEAR16 = AudioFormat("LINEAR16", 16000)
WEBM_OPUS = AudioFormat("WEBM_OPUS", 48000)
MP3 = AudioFormat("MP3", 44100)


def detect_audio_format(audio: bytes, mime_type: str = "", filename: str = "") -> AudioFormat:
    head = audio[:4]
    mime_type = mime_type.lower()
    filename = filename.lower()

    if head == b"fLaC":
        return FLAC
    if head == b"OggS":
        return OGG_OPUS
    if head == b"RIFF":
        return LINEAR16
    if head == b"\x1a\x45\xdf\xa3" or "webm" in mime_type:
        return WEBM_OPUS

    if any(marker in mime_type or marker in filename for marker in ("mp4", "aac")):
        return LINEAR16
    if "mp3" in mime_type or "mpeg" in mime_type or filename.endswith(".mp3"):
        return MP3
    if "ogg" in mime_type or filename.endswith(".ogg"):
        return OGG_OPUS
    if "flac" in mime_type or filename.endswith(".flac"):
        return FLAC
    return WEBM_OPUS
