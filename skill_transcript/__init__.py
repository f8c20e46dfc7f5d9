"""Audio/video transcription across ElevenLabs, OpenAI Whisper and Google Gemini,
with automatic chunking of files above a provider's size limit."""

__version__ = "1.0.0"
