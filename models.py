from sqlalchemy import Column, Integer, String, Text
from database import Base


class Submission(Base):
    __tablename__ = "submissions"

    # Insertion order stands in for the sheet's row order
    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(String, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    number = Column(String, nullable=False)
    message = Column(Text, nullable=False)


# Sheet header -> model attribute
COLUMN_MAP = {
    "Timestamp": "timestamp",
    "Name": "name",
    "Email": "email",
    "Number": "number",
    "Message": "message",
}
