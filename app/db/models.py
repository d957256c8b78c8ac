# path: trip-briefing-api/app/db/models.py

from sqlalchemy import BigInteger, Column, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.db.session import Base


class MarkerRow(Base):
    __tablename__ = "markers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    def __repr__(self):
        return f"<MarkerRow(id={self.id}, lat={self.latitude}, lon={self.longitude})>"


class RouteRow(Base):
    __tablename__ = "routes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(80), nullable=False)
    created_at = Column(BigInteger, nullable=False, index=True)  # epoch ms

    points = relationship(
        "RoutePointRow",
        back_populates="route",
        order_by="RoutePointRow.sequence",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<RouteRow(id={self.id}, name='{self.name}')>"


class RoutePointRow(Base):
    __tablename__ = "route_points"

    id = Column(Integer, primary_key=True, autoincrement=True)
    route_id = Column(Integer, ForeignKey("routes.id", ondelete="CASCADE"), nullable=False, index=True)
    marker_id = Column(Integer, ForeignKey("markers.id", ondelete="SET NULL"), nullable=True)
    sequence = Column(Integer, nullable=False)  # 0-based order along the route

    # Copied from the marker when the route is saved, never updated.
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    route = relationship("RouteRow", back_populates="points")

    def __repr__(self):
        return f"<RoutePointRow(route_id={self.route_id}, seq={self.sequence})>"
