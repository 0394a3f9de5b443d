from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class Record(BaseModel):
    """A stored row. ``id`` is assigned by the store, never by the caller."""
    id: str

    class Config:
        from_attributes = True


class University(BaseModel):
    id: str
    name: str
    logo_url: str


class Amenity(BaseModel):
    name: str
    icon: str  # font-awesome icon class


class Hostel(Record):
    name: str
    location: str
    price_range: str
    image_url: str
    image_urls: List[str] = Field(default_factory=list)
    rating: float = 0.0
    university_id: str
    description: str = ""
    amenities: List[Amenity] = Field(default_factory=list)
    is_recommended: bool = False


class NewsItem(Record):
    title: str
    description: str
    image_url: str
    source: str
    timestamp: str  # ISO date string
    featured: bool = False


class Event(Record):
    title: str
    date: str
    day: str
    month: str
    location: str
    image_url: str
    time: Optional[str] = None
    price: Optional[str] = None
    contacts: List[str] = Field(default_factory=list)
    phone: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    registration_link: Optional[str] = None


class Job(Record):
    title: str
    deadline: str
    company: str
    image_url: str
    location: str
    type: Literal["Full-time", "Part-time", "Internship"]
    description: str
    responsibilities: List[str] = Field(default_factory=list)
    qualifications: List[str] = Field(default_factory=list)
    how_to_apply: str  # URL of the application page


class RoommateProfile(Record):
    name: str
    email: str
    university_id: str
    contact_number: str
    student_number: str
    image_url: str

    # filled in progressively
    age: Optional[int] = None
    gender: Optional[Literal["Male", "Female"]] = None
    course: Optional[str] = None
    year_of_study: Optional[int] = None
    budget: Optional[float] = None  # UGX per month
    move_in_date: Optional[str] = None  # YYYY-MM-DD
    lease_duration: Optional[Literal["Semester", "Full Year", "Flexible"]] = None
    bio: Optional[str] = None
    is_smoker: Optional[bool] = None
    drinks_alcohol: Optional[Literal["Socially", "Rarely", "No"]] = None
    study_schedule: Optional[Literal["Early Bird", "Night Owl", "Flexible"]] = None
    cleanliness: Optional[Literal["Tidy", "Average", "Relaxed"]] = None
    guest_frequency: Optional[Literal["Rarely", "Sometimes", "Often"]] = None
    hobbies: Optional[str] = None  # comma separated
    seeking_gender: Optional[Literal["Male", "Female", "Any"]] = None


class StudentSpotlight(Record):
    name: str
    major: Optional[str] = None
    bio: Optional[str] = None
    image_url: Optional[str] = None
    university_id: Optional[str] = None
    date: Optional[str] = None
    votes: int = 0
    gender: Literal["male", "female", "other"] = "other"
    is_winner: bool = False
    interests: List[str] = Field(default_factory=list)


class ContactSubmission(Record):
    name: str
    email: str
    phone: str
    subject: str
    message: str
    timestamp: str  # ISO date string
    read: bool = False


class Service(BaseModel):
    id: str
    name: str
    icon: str
    description: str


class ServiceProvider(BaseModel):
    id: str
    name: str
    description: str
    rating: float
    review_count: int
    contact: str
    availability: str
    icon: str
    location: str
