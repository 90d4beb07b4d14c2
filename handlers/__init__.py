"""File event handlers for StoryMate."""

from handlers.base_handler import BaseHandler, HandlerResult
from handlers.story_handler import EventKind, StoryHandler, create_story_handler

__all__ = [
    "BaseHandler",
    "HandlerResult",
    "EventKind",
    "StoryHandler",
    "create_story_handler",
]
