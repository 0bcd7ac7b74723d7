"""Relay service brokering chat turns to the Gemini generative-language API."""

__version__ = "0.1.0"
