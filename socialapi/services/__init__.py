from socialapi.services.comments import CommentService
from socialapi.services.interactions import InteractionService
from socialapi.services.posts import PostService
from socialapi.services.users import UserService

__all__ = ["UserService", "PostService", "CommentService", "InteractionService"]
