"""
SQLAlchemy Database Models

Storage schema of the Sabor & Arte storefront. Table and column names
are shared with the Supabase project, so they keep their
(Portuguese) spelling; the API exposes English field names and the
flows translate at the storage boundary.

Nested sequences (cart lines, order details) live in TEXT columns as
JSON documents.
"""

from sqlalchemy import Column, Integer, String, Numeric, DateTime, Text
from sqlalchemy.sql import func
from sabor_arte.database import Base
import enum


class OrderStatus(str, enum.Enum):
    """Order status as stored. Later transitions belong to fulfillment."""
    PENDING = "Pendente"


class Profile(Base):
    """
    Customer profile, one row per auth identity.

    `id` is the identity issued by the auth service.
    """
    __tablename__ = "perfis"

    id = Column(String(64), primary_key=True)
    nome = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    telefone = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Profile {self.id} - {self.email}>"


class MenuItem(Base):
    """Menu row. Maintained by the catalog team; read-only here."""
    __tablename__ = "menu"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String(100), nullable=True, index=True)
    image_url = Column(String(500), nullable=True)

    def __repr__(self):
        return f"<MenuItem #{self.id} - {self.name}>"


class Order(Base):
    """Cart checkout without delivery metadata."""
    __tablename__ = "pedidos"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)

    items_json = Column(Text, nullable=False)  # JSON array of cart lines
    details_json = Column(Text, nullable=True)  # JSON object
    total = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def __repr__(self):
        return f"<Order #{self.id} - {self.user_id} - {self.status}>"


class FinalizedOrder(Base):
    """Checkout carrying delivery details."""
    __tablename__ = "pedidos_finalizados"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)

    # Delivery details
    nome = Column(String(100), nullable=False)
    telefone = Column(String(20), nullable=False)
    endereco = Column(String(255), nullable=False)
    pagamento = Column(String(50), nullable=False)
    observacoes = Column(Text, nullable=True)

    items_json = Column(Text, nullable=False)  # JSON array of cart lines
    total = Column(Numeric(10, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def __repr__(self):
        return f"<FinalizedOrder #{self.id} - {self.user_id}>"
