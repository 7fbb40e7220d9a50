from sqlalchemy import Column, String, Text

from floodscout.database import Base


class Report(Base):
    __tablename__ = "reports"

    id = Column(String, primary_key=True)
    image_url = Column(Text, nullable=False)  # data URLs can be megabytes long
    analysis = Column(Text, nullable=False)  # AnalysisResult as JSON
    timestamp = Column(String, nullable=False)
