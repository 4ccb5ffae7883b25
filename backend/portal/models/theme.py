from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from portal.db.base import ContentBase


class Theme(ContentBase):
    __tablename__ = "themes"

    # id, created_at, updated_at inherited from ContentBase
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    colors: Mapped[dict] = mapped_column(JSON, nullable=False)
    logo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
