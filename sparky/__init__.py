"""sparky: natural-language control of a notes app through Gemini function calling."""

__version__ = "0.1.0"
