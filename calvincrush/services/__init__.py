from .exceptions import AlreadyActedError, InvalidArgumentError
from .message_service import MessageService, get_message_service
from .recommendation_service import RecommendationService, get_recommendation_service
from .swipe_service import SwipeService, get_swipe_service
from .user_service import UserService, get_user_service

__all__ = [
    "AlreadyActedError",
    "InvalidArgumentError",
    "MessageService",
    "RecommendationService",
    "SwipeService",
    "UserService",
    "get_message_service",
    "get_recommendation_service",
    "get_swipe_service",
    "get_user_service",
]
