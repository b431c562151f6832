"""Python client for the VoiceApp API."""

from app.client.api import ApiError, VoiceAppAPI
from app.client.polling import FeedPoller
from app.client.recording import CaptureSession, FileCaptureDevice, Recording, SessionBusy
from app.client.state import ClientApp, NotSignedIn, Screen, Tab
from app.client.waveform import AudioClip, WaveformRegistry

__all__ = [
    "ApiError",
    "VoiceAppAPI",
    "FeedPoller",
    "CaptureSession",
    "FileCaptureDevice",
    "Recording",
    "SessionBusy",
    "ClientApp",
    "NotSignedIn",
    "Screen",
    "Tab",
    "AudioClip",
    "WaveformRegistry",
]
