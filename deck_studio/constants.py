"""
Constants for Deck Studio

Storage keys and defaults shared by the history, credential and autosave layers.
Keys match the persisted layout so existing histories stay readable.
"""

# Key-value storage keys
HISTORY_STORAGE_KEY = "GENAI_PPT_HISTORY"  # JSON array of HistoryItem, most recent first
API_KEY_STORAGE_KEY = "GENAI_API_KEY"  # Opaque AI credential
LANGUAGE_STORAGE_KEY = "GENAI_LANG"  # Preferred output language

# Autosave debounce window
AUTOSAVE_DELAY_MS = 1000

# Default quota for local backends, same budget as browser local storage
DEFAULT_STORAGE_QUOTA_BYTES = 5 * 1024 * 1024

# Fallback topic for untitled presentations
UNTITLED_TOPIC = "Untitled"

# Outline contract
MIN_OUTLINE_SLIDES = 5
MAX_OUTLINE_SLIDES = 8
MIN_BULLETS = 3
MAX_BULLETS = 4

# Gemini defaults
DEFAULT_OUTLINE_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "gemini-3-pro-image-preview"
DEFAULT_IMAGE_ASPECT_RATIO = "16:9"
DEFAULT_IMAGE_SIZE = "1K"

# MongoDB backend
MONGODB_DATABASE = "deck_studio"
MONGODB_COLLECTION = "kv_store"
