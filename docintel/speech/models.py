from dataclasses import dataclass


@dataclass(frozen=True)
class AudioFormat:
    encoding: str
    sample_rate_hertz: int

    @property
    def sends_sample_rate(self) -> bool:
        """WEBM_OPUS carries its own rate; the service rejects an explicit one."""
        return self.encoding != "WEBM_OPUS"


@dataclass(frozen=True)
class Transcription:
    transcript: str
    confidence: float
    encoding: str = ""
