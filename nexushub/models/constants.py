"""Constants for nexushub.

This module centralizes the magic numbers and default values used throughout the application.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Storage layout
KEY_NAMESPACE = "nexus"
SESSION_KEY = "nexus_active_user"
SERIALIZATION_VERSION = 1

# Collection names
LINKS_COLLECTION = "links"
PASSWORDS_COLLECTION = "passwords"
EVENTS_COLLECTION = "events"
CHATS_COLLECTION = "chats"
USERS_COLLECTION = "users"

# Storage quota, counted in characters of key + value like browser storage (~5 MiB)
DEFAULT_STORAGE_QUOTA_CHARS = int(os.getenv("NEXUS_STORAGE_QUOTA_CHARS", str(5 * 1024 * 1024)))

# Simulated I/O latency for every persistence call
DEFAULT_STORAGE_LATENCY_MS = float(os.getenv("NEXUS_STORAGE_LATENCY_MS", "300"))

STORAGE_FULL_MESSAGE = "Storage full! Please delete old items to free up space."

# Chat retention
CHAT_RETENTION_HOURS = 24
CHAT_MAX_MESSAGES = 50

# Password strength thresholds
WEAK_PASSWORD_MAX_LENGTH = 7
MEDIUM_PASSWORD_MAX_LENGTH = 11
GENERATED_PASSWORD_LENGTH = 16

# Dashboard / assistant
UPCOMING_EVENTS_LIMIT = 3
MAX_LINK_TAGS = 4
