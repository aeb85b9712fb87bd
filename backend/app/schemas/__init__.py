from app.schemas.tag import Tag, TagCreate, TagUpdate
from app.schemas.author import Author, AuthorCreate, AuthorUpdate
from app.schemas.logo import Logo, LogoCreate, LogoUpdate
from app.schemas.blog import Blog, BlogCreate, BlogUpdate, BlogReferenceSummary
from app.schemas.event import Event, EventCreate, EventUpdate, EventItem, EventItemCreate
from app.schemas.announcement import (
    Announcement,
    AnnouncementCreate,
    AnnouncementUpdate,
)
from app.schemas.highlight import Highlight, HighlightCreate, HighlightUpdate
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    VerifyResponse,
    ChangePasswordRequest,
    ChangePasswordResponse,
    UploadResponse,
    UserPublic,
)

__all__ = [
    "Tag",
    "TagCreate",
    "TagUpdate",
    "Author",
    "AuthorCreate",
    "AuthorUpdate",
    "Logo",
    "LogoCreate",
    "LogoUpdate",
    "Blog",
    "BlogCreate",
    "BlogUpdate",
    "BlogReferenceSummary",
    "Event",
    "EventCreate",
    "EventUpdate",
    "EventItem",
    "EventItemCreate",
    "Announcement",
    "AnnouncementCreate",
    "AnnouncementUpdate",
    "Highlight",
    "HighlightCreate",
    "HighlightUpdate",
    "LoginRequest",
    "LoginResponse",
    "VerifyResponse",
    "ChangePasswordRequest",
    "ChangePasswordResponse",
    "UploadResponse",
    "UserPublic",
]
