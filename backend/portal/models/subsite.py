import uuid

from sqlalchemy import Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from portal.db.base import ContentBase


class Subsite(ContentBase):
    __tablename__ = "subsites"

    # id, created_at, updated_at inherited from ContentBase
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon_kind: Mapped[str | None] = mapped_column(String(16), nullable=True)
    icon_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    custom_domain: Mapped[str | None] = mapped_column(String(253), nullable=True)
    # No FK: deleting a parent leaves children pointing at the removed id
    parent_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
