# document.py
from sqlalchemy import Column, DateTime, Integer, JSON, String, UniqueConstraint, func
from jobboard.database import Base


class DocumentRecord(Base):
    __tablename__ = "documents"
    __table_args__ = (UniqueConstraint("collection_path", "document_id", name="uq_documents_path"),)

    id = Column(Integer, primary_key=True, index=True)
    collection_path = Column(String(512), nullable=False, index=True)
    document_id = Column(String(255), nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
