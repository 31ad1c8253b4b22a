from socialapi.models.post import Comment, Follow, Like, Post
from socialapi.models.user import User

__all__ = ["User", "Post", "Comment", "Like", "Follow"]
