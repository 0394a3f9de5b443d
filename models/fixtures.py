import json
import os
from functools import lru_cache

from models.models import (
    Amenity, Event, Hostel, Job, NewsItem, RoommateProfile, Service,
    ServiceProvider, University,
)

DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data")
SERVICE_PROVIDERS_PATH = os.path.join(DATA_DIR, "service_providers.json")

MAKERERE_ID = "123e4567-e89b-12d3-a456-426614174001"
KYAMBOGO_ID = "123e4567-e89b-12d3-a456-426614174002"

HOSTELS = [
    Hostel(
        id="1",
        name="Olympia Hostel",
        location="Makerere Kikoni",
        price_range="600,000 - 1,200,000 UGX",
        image_url="/images/hostels/olympia.jpg",
        image_urls=["/images/hostels/olympia.jpg"],
        rating=4.5,
        university_id=MAKERERE_ID,
        description="Luxury student accommodation near Makerere University",
        amenities=[
            Amenity(name="WiFi", icon="fas fa-wifi"),
            Amenity(name="Security", icon="fas fa-shield-alt"),
            Amenity(name="DSTV", icon="fas fa-tv"),
        ],
        is_recommended=True,
    ),
    Hostel(
        id="2",
        name="Nana Hostel",
        location="Kyambogo Banda",
        price_range="450,000 - 800,000 UGX",
        image_url="/images/hostels/nana.jpg",
        image_urls=["/images/hostels/nana.jpg", "/images/hostels/nana-room.jpg"],
        rating=4.1,
        university_id=KYAMBOGO_ID,
        description="Affordable rooms a short walk from Kyambogo campus",
        amenities=[
            Amenity(name="Water", icon="fas fa-shower"),
            Amenity(name="Shuttle", icon="fas fa-bus"),
        ],
        is_recommended=False,
    ),
]

NEWS_ITEMS = [
    NewsItem(
        id="1",
        title="New Student Housing Development",
        description="Major new student housing development announced near Makerere",
        image_url="/images/news/housing.jpg",
        source="UniStay News",
        timestamp="2025-10-01T08:00:00.000Z",
        featured=False,
    ),
]

EVENTS = [
    Event(
        id="1",
        title="Housing Fair 2025",
        date="2025-11-15",
        day="15",
        month="NOV",
        location="Freedom Square",
        image_url="/images/events/housing-fair.jpg",
        time="10:00 AM",
        price="Free",
        description="Annual housing fair for students",
    ),
]

JOBS = [
    Job(
        id="1",
        title="Student Ambassador",
        deadline="2025-12-01",
        company="UniStay",
        image_url="/images/jobs/ambassador.jpg",
        location="Kampala",
        type="Part-time",
        description="Represent UniStay on campus",
        responsibilities=["Campus outreach", "Social media management"],
        qualifications=["Current student", "Good communication skills"],
        how_to_apply="https://unistay.com/careers",
    ),
]

ROOMMATE_PROFILES = [
    RoommateProfile(
        id="demo1",
        name="John Doe",
        email="john@example.com",
        university_id=MAKERERE_ID,
        contact_number="+256700000000",
        student_number="MAK/000001",
        image_url="/images/profiles/default.jpg",
        age=20,
        gender="Male",
        course="Computer Science",
        year_of_study=2,
        budget=800000,
        move_in_date="2025-09-01",
        lease_duration="Semester",
        bio="Tech enthusiast looking for like-minded roommate",
        is_smoker=False,
        drinks_alcohol="Rarely",
        study_schedule="Night Owl",
        cleanliness="Tidy",
        guest_frequency="Sometimes",
        hobbies="Programming, Gaming, Reading",
        seeking_gender="Any",
    ),
]

STUDENT_SPOTLIGHTS = []

CONTACT_SUBMISSIONS = []

UNIVERSITIES = [
    University(id=MAKERERE_ID, name="Makerere University", logo_url="/images/hostels/makerere.jpg"),
    University(id=KYAMBOGO_ID, name="Kyambogo University", logo_url="/images/hostels/kyambogo.jpg"),
    University(id="123e4567-e89b-12d3-a456-426614174003", name="Makerere University Business School", logo_url="/images/hostels/mubs.jpg"),
    University(id="123e4567-e89b-12d3-a456-426614174004", name="Uganda Christian University", logo_url="/images/hostels/ucu.png"),
    University(id="123e4567-e89b-12d3-a456-426614174005", name="UMU Nkozi", logo_url="/images/hostels/umu.png"),
    University(id="123e4567-e89b-12d3-a456-426614174006", name="Kampala International University", logo_url="/images/hostels/kiu.jpg"),
    University(id="123e4567-e89b-12d3-a456-426614174007", name="MUST", logo_url="/images/hostels/must.jpg"),
    University(id="123e4567-e89b-12d3-a456-426614174008", name="Aga Khan", logo_url="/images/hostels/agaKhan.jpg"),
    University(id="123e4567-e89b-12d3-a456-426614174009", name="Gulu", logo_url="/images/hostels/gulu.png"),
    University(id="123e4567-e89b-12d3-a456-426614174010", name="Lira", logo_url="/images/hostels/lira.png"),
    University(id="123e4567-e89b-12d3-a456-426614174011", name="IUEA", logo_url="/images/hostels/iuea.jpg"),
    University(id="123e4567-e89b-12d3-a456-426614174012", name="Soroti University", logo_url="/images/hostels/soroti.png"),
]

SERVICES = [
    Service(id="food", name="Food", icon="fas fa-utensils", description="Best & affordable food spots."),
    Service(id="transport", name="Transport", icon="fas fa-motorcycle", description="Easy ways to get around campus."),
    Service(id="shopping", name="Shopping", icon="fas fa-shopping-bag", description="Your essentials and retail therapy."),
    Service(id="stationery", name="Stationery", icon="fas fa-book-open", description="All your academic supplies."),
    Service(id="laundry", name="Laundry", icon="fas fa-tshirt", description="Quick & convenient laundry services."),
    Service(id="entertainment", name="Entertainment", icon="fas fa-ticket-alt", description="Fun activities and hangout joints."),
    Service(id="internet", name="Internet", icon="fas fa-wifi", description="Reliable internet for study & fun."),
    Service(id="health", name="Health", icon="fas fa-heartbeat", description="Clinics, pharmacies & wellness."),
]

AMENITIES_LIST = [
    Amenity(name="WiFi", icon="fas fa-wifi"),
    Amenity(name="Shuttle", icon="fas fa-bus"),
    Amenity(name="Security", icon="fas fa-shield-alt"),
    Amenity(name="DSTV", icon="fas fa-tv"),
    Amenity(name="Pool", icon="fas fa-swimmer"),
    Amenity(name="Gym", icon="fas fa-dumbbell"),
    Amenity(name="Restaurant", icon="fas fa-utensils"),
    Amenity(name="Water", icon="fas fa-shower"),
]

# collection name -> seed records, shared by the mock store and the local database
SEED_DATA = {
    "hostels": HOSTELS,
    "news": NEWS_ITEMS,
    "events": EVENTS,
    "jobs": JOBS,
    "roommate_profiles": ROOMMATE_PROFILES,
    "student_spotlights": STUDENT_SPOTLIGHTS,
    "contact_submissions": CONTACT_SUBMISSIONS,
}


@lru_cache(maxsize=1)
def load_service_providers() -> dict[str, dict[str, list[ServiceProvider]]]:
    with open(SERVICE_PROVIDERS_PATH, encoding="utf-8") as f:
        raw = json.load(f)
    return {
        university: {
            service_id: [ServiceProvider(**p) for p in providers]
            for service_id, providers in services.items()
        }
        for university, services in raw.items()
    }


def get_service_providers(university_name: str, service_id: str) -> list[ServiceProvider] | None:
    """Providers for one (university, service) pair, or None when either is unknown."""
    by_service = load_service_providers().get(university_name)
    if by_service is None:
        return None
    return by_service.get(service_id)
