from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sacristy.db.base import Base


class BlogPost(Base):
    """Blog post. Content is HTML produced by the embedded editor."""

    __tablename__ = "blog_posts"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    excerpt: Mapped[str] = mapped_column(Text, nullable=False, default="")
    featured_image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    image_public_id: Mapped[str | None] = mapped_column(String(512), nullable=True)
    author: Mapped[str] = mapped_column(String(255), nullable=False, default="Administrador")
    is_published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
