from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from floorplan.models.base import Base, TimestampMixin, new_id


class Asset(Base, TimestampMixin):
    __tablename__ = "assets"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    label: Mapped[str] = mapped_column(String(200))
    assigned_to: Mapped[str | None] = mapped_column(String(50))  # resource id
    asset_type_id: Mapped[str] = mapped_column(ForeignKey("asset_types.id"))

    asset_type: Mapped["AssetType"] = relationship(back_populates="assets")  # noqa: F821
