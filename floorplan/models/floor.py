from sqlalchemy import Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from floorplan.models.base import Base, TimestampMixin, new_id


class Floor(Base, TimestampMixin):
    __tablename__ = "floors"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100))
    width: Mapped[int] = mapped_column(Integer)
    height: Mapped[int] = mapped_column(Integer)

    items: Mapped[list["FloorItem"]] = relationship(
        back_populates="floor", cascade="all, delete-orphan"
    )


class FloorItem(Base, TimestampMixin):
    __tablename__ = "floor_items"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    floor_id: Mapped[str] = mapped_column(ForeignKey("floors.id", ondelete="CASCADE"))
    # asset type name, matched case-insensitively when rendering
    type: Mapped[str] = mapped_column(String(100))
    pos_x: Mapped[float] = mapped_column(Float, default=0.0)
    pos_y: Mapped[float] = mapped_column(Float, default=0.0)
    rotation: Mapped[float] = mapped_column(Float, default=0.0)
    label: Mapped[str | None] = mapped_column(String(200))
    assigned_to: Mapped[str | None] = mapped_column(String(50))

    floor: Mapped["Floor"] = relationship(back_populates="items")
