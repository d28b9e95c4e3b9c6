"""scribe: record from a microphone, transcribe with whisper, copy to the clipboard."""

__version__ = "0.1.0"
