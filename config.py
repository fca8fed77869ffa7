"""Configuration management using Pydantic settings"""

import platform
import os
import shutil
from pathlib import Path
from pydantic_settings import BaseSettings
from typing import List, Optional


def get_default_storage_path() -> str:
    """
    Get OS-specific default storage path for StudyBuddy speech settings.

    Returns:
        - macOS: ~/Library/Application Support/StudyBuddy
        - Linux: ~/.local/share/studybuddy
        - Windows: %APPDATA%/StudyBuddy
    """
    system = platform.system()
    home = Path.home()

    if system == "Darwin":  # macOS
        return str(home / "Library" / "Application Support" / "StudyBuddy")
    elif system == "Windows":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return str(Path(appdata) / "StudyBuddy")
        return str(home / "AppData" / "Roaming" / "StudyBuddy")
    else:  # Linux and others
        # Follow XDG Base Directory specification
        xdg_data = os.environ.get("XDG_DATA_HOME")
        if xdg_data:
            return str(Path(xdg_data) / "studybuddy")
        return str(home / ".local" / "share" / "studybuddy")


def get_ffplay_path() -> str:
    """
    Locate the ffplay binary used for remote clip playback.

    Returns the system path if found, otherwise the bare command name
    (playback will then fail with a PlaybackError).
    """
    ffplay_name = "ffplay.exe" if platform.system() == "Windows" else "ffplay"
    return shutil.which(ffplay_name) or ffplay_name


class Settings(BaseSettings):
    """Application settings"""

    # Storage for the persisted speech configuration
    STORAGE_DIR: str = get_default_storage_path()
    SPEECH_SETTINGS_FILE: str = "speech_settings.json"

    # Where remote providers reach the proxy routes
    SPEECH_PROXY_URL: str = "http://localhost:8000/api/v1/speech"

    # API server
    SPEECH_HOST: str = "localhost"
    SPEECH_PORT: int = 8000
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # Playback
    FFPLAY_PATH: str = get_ffplay_path()

    # Local engine
    LOCAL_BASE_WPM: int = 200
    LOCAL_VOICES_TIMEOUT: float = 5.0

    # Reject a speak request while another one is in flight
    SPEECH_SINGLE_FLIGHT: bool = False

    # Vendor endpoints
    GOOGLE_TTS_URL: str = "https://texttospeech.googleapis.com/v1/text:synthesize"
    ELEVENLABS_TTS_URL: str = "https://api.elevenlabs.io/v1/text-to-speech"
    ELEVENLABS_MODEL_ID: str = "eleven_monolingual_v1"
    AZURE_TOKEN_URL: str = "https://{region}.api.cognitive.microsoft.com/sts/v1.0/issuetoken"
    AZURE_TTS_URL: str = "https://{region}.tts.speech.microsoft.com/cognitiveservices/v1"
    AZURE_OUTPUT_FORMAT: str = "audio-16khz-128kbitrate-mono-mp3"
    VENDOR_USER_AGENT: str = "AI-StudyBuddy"

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def speech_settings_path(self) -> Path:
        """Full path of the persisted speech settings file"""
        return Path(self.STORAGE_DIR) / self.SPEECH_SETTINGS_FILE

    def create_directories(self):
        """Create necessary directories"""
        Path(self.STORAGE_DIR).mkdir(parents=True, exist_ok=True)

    def get_storage_info(self) -> dict:
        """Get storage path information for API"""
        return {
            "storage_path": self.STORAGE_DIR,
            "default_path": get_default_storage_path(),
            "is_default": self.STORAGE_DIR == get_default_storage_path(),
            "platform": platform.system(),
            "settings_file": str(self.speech_settings_path),
        }


settings = Settings()
