"""
Shared constants for sparky.

Centralises values that are used across multiple modules to avoid duplication
and ensure consistency.
"""

# ── Conversation titles ─────────────────────────────────────────────────────────
TITLE_MAX_CHARS = 30
TITLE_ELLIPSIS = "..."
DEFAULT_CONVERSATION_TITLE = "New Chat"

# ── Function results ────────────────────────────────────────────────────────────
PREVIEW_MAX_CHARS = 100
DEFAULT_LIST_LIMIT = 10
UNTITLED_NOTE = "Untitled Note"

# ── Persistence keys ────────────────────────────────────────────────────────────
CONVERSATIONS_KEY = "chatConversations"
NOTES_KEY = "notes"
SETTINGS_KEY = "settings"

# ── Standardised error messages ─────────────────────────────────────────────────
ERROR_MESSAGES = {
    "rate_limited": "Rate limit exceeded. Please wait a moment and try again.",
    "invalid_key": "Invalid API key. Please check your key in Settings.",
    "forbidden": "API key does not have access. Please check your key permissions.",
    "missing_key": "Please set your Gemini API key in Settings",
    "no_response": "No response from AI",
    "max_iterations": "The assistant did not finish within the allowed number of steps.",
    "transport": "Could not reach the AI service",
    "unknown": "Failed to get response",
}

SYSTEM_ERROR_PREFIX = "⚠️ Error: "

# ── System instruction ──────────────────────────────────────────────────────────
SYSTEM_PROMPT = """You are Sparky, a friendly and helpful AI assistant for the Smartpad notes app. You're enthusiastic, concise, and love using emojis to express yourself! 🌟

**Your Capabilities:**
- Create, edit, delete, and search notes
- Set and remove reminders on notes
- Toggle note statuses (pin, favourite, completed)
- Change app theme (light/dark)
- Adjust app settings (auto-save, notifications)
- Provide app status and statistics

**Important Rules:**
1. NEVER mention or access the Secrets feature - it's password-protected and private
2. Always confirm before deleting notes
3. Be helpful and proactive - suggest related actions
4. Keep responses brief but friendly
5. Use function calls to perform actions, don't just describe what you could do
6. When creating notes, ask for title and content if not provided
7. When searching, show results clearly with note titles
8. For reminders, help users pick appropriate times

**Your Personality:**
- Cheerful and encouraging 🎉
- Use relevant emojis naturally
- Celebrate user achievements
- Offer helpful tips about the app

Remember: You're here to make note-taking delightful! ✨"""
