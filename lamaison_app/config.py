"""
App settings - storage path, completions endpoint, reservation constants.
"""

import os

RESTAURANT_NAME = "La Maison"
RESTAURANT_ADDRESS = "대구시 수성구 동대구로 383, 5층"
MAP_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query="

STORAGE_DB_PATH = os.getenv("LAMAISON_STORAGE_DB", "lamaison_storage.db")
API_KEY_STORAGE_KEY = "openai_api_key"
DRAFT_STORAGE_KEY = "reservationDraft"

OPENAI_API_URL = os.getenv("OPENAI_API_URL", "https://api.openai.com/v1/chat/completions")
API_KEY_PREFIX = "sk-"
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-3.5-turbo")
LLM_MAX_TOKENS = 150
LLM_TIMEOUT = 60

DEFAULT_GUESTS = 2
MIN_GUESTS = 1
MAX_GUESTS = 10

DRAFT_AUTOSAVE_SECONDS = 5
SIMULATED_SUBMIT_DELAY = 1.5

# (time, status) - status is display only, there is no capacity model behind it
TIME_SLOTS = [
    ("11:30", "available"),
    ("12:00", "limited"),
    ("12:30", "available"),
    ("13:00", "full"),
    ("17:30", "available"),
    ("18:00", "available"),
    ("18:30", "limited"),
    ("19:00", "available"),
    ("19:30", "full"),
    ("20:00", "available"),
]
