import uuid
from datetime import datetime
from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey, Text, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from inkwell.core.database import Base


class Category(Base):
    """Top-level taxonomy node: a blog Topic or a library Genre."""

    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    taxonomy: Mapped[str] = mapped_column(String(20), nullable=False)  # 'topics', 'genres'
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    icon: Mapped[str | None] = mapped_column(String(50))
    color: Mapped[str | None] = mapped_column(String(7))
    order: Mapped[int] = mapped_column("display_order", Integer, default=0, nullable=False)
    featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    subcategories: Mapped[list["Subcategory"]] = relationship(
        "Subcategory",
        back_populates="category",
        order_by=lambda: (Subcategory.order, Subcategory.name, Subcategory.id),
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("taxonomy", "slug", name="uq_category_taxonomy_slug"),
        Index("idx_category_taxonomy_order", "taxonomy", "display_order"),
    )

    # Filled in by CategoryStore.list(); not a column
    subcategory_count = 0

    def __repr__(self) -> str:
        return f"<Category {self.taxonomy}:{self.slug}>"


class Subcategory(Base):
    """Second-level node owned by exactly one Category."""

    __tablename__ = "subcategories"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    category_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    icon: Mapped[str | None] = mapped_column(String(50))
    order: Mapped[int] = mapped_column("display_order", Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    category: Mapped["Category"] = relationship("Category", back_populates="subcategories")

    # Slugs only need to be unique under one parent
    __table_args__ = (
        UniqueConstraint("category_id", "slug", name="uq_subcategory_category_slug"),
        Index("idx_subcategory_category_order", "category_id", "display_order"),
    )

    def __repr__(self) -> str:
        return f"<Subcategory {self.slug}>"
