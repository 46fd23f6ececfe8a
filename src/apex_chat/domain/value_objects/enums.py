from __future__ import annotations

from enum import StrEnum


class MessageType(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"
    SYSTEM = "system"


class UserRole(StrEnum):
    CANDIDATE = "candidate"
    STUDENT = "student"
    COMPANY = "company"
    ADMIN = "admin"
    MASTER_ADMIN = "master_admin"


class PresenceStatus(StrEnum):
    ONLINE = "online"
    OFFLINE = "offline"
