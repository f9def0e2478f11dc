from datetime import datetime
from typing import List

from sqlalchemy import JSON, BigInteger, CheckConstraint, DateTime, Integer, String, Text, false, func, text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, registry

table_registry = registry()

# text[] on PostgreSQL, JSON elsewhere (SQLite in tests).
GenresType = JSON().with_variant(ARRAY(String), "postgresql")
IdType = BigInteger().with_variant(Integer, "sqlite")


@table_registry.mapped_as_dataclass
class Movie:
    __tablename__ = "movies"
    __table_args__ = (
        CheckConstraint("runtime >= 0", name="movies_runtime_check"),
        CheckConstraint("year >= 1888", name="movies_year_check"),
    )

    id: Mapped[int] = mapped_column(IdType, init=False, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text)
    year: Mapped[int] = mapped_column(Integer)
    runtime: Mapped[int] = mapped_column(Integer)
    genres: Mapped[List[str]] = mapped_column(GenresType)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), init=False, server_default=func.now())
    version: Mapped[int] = mapped_column(Integer, init=False, default=1, server_default=text("1"))
    deleted: Mapped[bool] = mapped_column(init=False, default=False, server_default=false())
