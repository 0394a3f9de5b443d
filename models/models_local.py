import json

from sqlalchemy import Boolean, Column, Float, Integer, String, Text
from sqlalchemy.orm import Session
from sqlalchemy.types import TypeDecorator

from db import Base
from models.fixtures import SEED_DATA


class JSONText(TypeDecorator):
    """List/object value stored as JSON text; decodes back to an equal value."""
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return json.dumps(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return json.loads(value)


class HostelRow(Base):
    __tablename__ = "hostels"
    id = Column(String, primary_key=True)
    name = Column(String)
    location = Column(String)
    price_range = Column(String)
    image_url = Column(String)
    image_urls = Column(JSONText)
    rating = Column(Float)
    university_id = Column(String, index=True)
    description = Column(Text)
    amenities = Column(JSONText)
    is_recommended = Column(Boolean)


class NewsRow(Base):
    __tablename__ = "news"
    id = Column(String, primary_key=True)
    title = Column(String)
    description = Column(Text)
    image_url = Column(String)
    source = Column(String)
    timestamp = Column(String)
    featured = Column(Boolean)


class EventRow(Base):
    __tablename__ = "events"
    id = Column(String, primary_key=True)
    title = Column(String)
    date = Column(String)
    day = Column(String)
    month = Column(String)
    location = Column(String)
    image_url = Column(String)
    time = Column(String)
    price = Column(String)
    contacts = Column(JSONText)
    phone = Column(String)
    email = Column(String)
    description = Column(Text)
    registration_link = Column(String)


class JobRow(Base):
    __tablename__ = "jobs"
    id = Column(String, primary_key=True)
    title = Column(String)
    deadline = Column(String)
    company = Column(String)
    image_url = Column(String)
    location = Column(String)
    type = Column(String)
    description = Column(Text)
    responsibilities = Column(JSONText)
    qualifications = Column(JSONText)
    how_to_apply = Column(String)


class RoommateProfileRow(Base):
    __tablename__ = "roommate_profiles"
    id = Column(String, primary_key=True)
    name = Column(String)
    email = Column(String)
    contact_number = Column(String)
    student_number = Column(String)
    image_url = Column(String)
    age = Column(Integer)
    gender = Column(String)
    university_id = Column(String, index=True)
    course = Column(String)
    year_of_study = Column(Integer)
    budget = Column(Float)
    move_in_date = Column(String)
    lease_duration = Column(String)
    bio = Column(Text)
    is_smoker = Column(Boolean)
    drinks_alcohol = Column(String)
    study_schedule = Column(String)
    cleanliness = Column(String)
    guest_frequency = Column(String)
    hobbies = Column(String)
    seeking_gender = Column(String)


class StudentSpotlightRow(Base):
    __tablename__ = "student_spotlights"
    id = Column(String, primary_key=True)
    name = Column(String)
    major = Column(String)
    bio = Column(Text)
    image_url = Column(String)
    university_id = Column(String)
    date = Column(String)
    votes = Column(Integer, default=0)
    gender = Column(String)
    is_winner = Column(Boolean, default=False)
    interests = Column(JSONText)


class ContactSubmissionRow(Base):
    __tablename__ = "contact_submissions"
    id = Column(String, primary_key=True)
    name = Column(String)
    email = Column(String)
    phone = Column(String)
    subject = Column(String)
    message = Column(Text)
    timestamp = Column(String, index=True)
    read = Column(Boolean, default=False)


TABLES = {
    "hostels": HostelRow,
    "news": NewsRow,
    "events": EventRow,
    "jobs": JobRow,
    "roommate_profiles": RoommateProfileRow,
    "student_spotlights": StudentSpotlightRow,
    "contact_submissions": ContactSubmissionRow,
}


def seed_database(db: Session) -> None:
    for collection, records in SEED_DATA.items():
        table = TABLES[collection]
        db.add_all(table(**record.model_dump()) for record in records)
