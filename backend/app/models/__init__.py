from .user import User
from .author import Author
from .logo import Logo
from .tag import Tag
from .blog import Blog, BlogTag, BlogReference
from .announcement import Announcement
from .event import Event, EventItem
from .highlight import Highlight

__all__ = [
    "User",
    "Author",
    "Logo",
    "Tag",
    "Blog",
    "BlogTag",
    "BlogReference",
    "Announcement",
    "Event",
    "EventItem",
    "Highlight",
]
