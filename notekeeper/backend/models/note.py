"""
Note Model.

Database model for notes, the only entity of the application.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notekeeper.backend.models.base import Base, TimestampMixin, UUIDMixin

TITLE_MAX_LENGTH = 255


class Note(UUIDMixin, TimestampMixin, Base):
    """
    Note database model.

    `tags` holds the JSON-encoded tag list (see repositories.tag_codec);
    the store has no array column type, so the raw text is persisted
    and returned verbatim by the repository.
    """

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    tags: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="[]",
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"
