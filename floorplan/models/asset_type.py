from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from floorplan.models.base import Base, TimestampMixin, new_id


class AssetType(Base, TimestampMixin):
    __tablename__ = "asset_types"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    icon_definition: Mapped[str] = mapped_column(Text)  # JSON vector-graphic descriptor

    assets: Mapped[list["Asset"]] = relationship(back_populates="asset_type")  # noqa: F821
