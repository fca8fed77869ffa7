"""
Audio playback for remote speech providers

Remote vendors return a finished audio clip. The clip is written to a
temporary file and played through ffplay; the call resolves when the
player exits.
"""

import asyncio
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Optional

from .base import PlaybackError

from config import settings
from utils.logger import logger


CONTENT_TYPE_SUFFIXES = {
    "audio/mpeg": ".mp3",
    "audio/mp3": ".mp3",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/ogg": ".ogg",
}


class AudioPlayer(ABC):
    """Device audio sink for downloaded clips"""

    @abstractmethod
    async def play(self, audio: bytes, content_type: str = "audio/mpeg") -> None:
        """Play ``audio``; resolves when playback ends, raises PlaybackError on failure"""
        pass


class FFplayAudioPlayer(AudioPlayer):
    """AudioPlayer that shells out to ffplay"""

    def __init__(self, ffplay_path: Optional[str] = None):
        self.ffplay_path = ffplay_path or settings.FFPLAY_PATH

    async def play(self, audio: bytes, content_type: str = "audio/mpeg") -> None:
        if not audio:
            raise PlaybackError("Failed to play audio: empty clip")

        suffix = CONTENT_TYPE_SUFFIXES.get(content_type.split(";")[0].strip(), ".mp3")
        with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as tmp:
            tmp.write(audio)
            tmp_path = tmp.name

        try:
            try:
                process = await asyncio.create_subprocess_exec(
                    self.ffplay_path,
                    "-nodisp",
                    "-autoexit",
                    "-loglevel", "error",
                    tmp_path,
                    stdout=asyncio.subprocess.DEVNULL,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as e:
                raise PlaybackError(f"Failed to play audio: {e}") from e

            _, stderr_data = await process.communicate()

            if process.returncode not in (0, None):
                detail = stderr_data.decode("utf-8", errors="ignore").strip() if stderr_data else ""
                logger.error(f"ffplay exited with {process.returncode}: {detail}")
                raise PlaybackError("Failed to play audio")
        finally:
            try:
                os.remove(tmp_path)
            except OSError:
                pass
