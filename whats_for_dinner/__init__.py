"""What's for Dinner? - dinner ideas from ingredients and photos using Gemini."""

__version__ = "1.0.0"
