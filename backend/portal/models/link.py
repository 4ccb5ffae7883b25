import uuid

from sqlalchemy import ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from portal.db.base import ContentBase


class Link(ContentBase):
    __tablename__ = "links"

    # id, created_at, updated_at inherited from ContentBase
    subsite_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("subsites.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon_kind: Mapped[str | None] = mapped_column(String(16), nullable=True)
    icon_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
