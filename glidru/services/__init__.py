"""
Services - the operations behind the HTTP routes.
"""

from glidru.services.questions import QuestionStore
from glidru.services.users import UserService

__all__ = [
    "QuestionStore",
    "UserService",
]
