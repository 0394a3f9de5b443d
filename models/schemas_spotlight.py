from typing import Literal
from pydantic import BaseModel

ABOUT_MIN_LENGTH = 50


class NominationForm(BaseModel):
    full_name: str = ""
    university: str = ""  # university id
    course: str = ""
    year_of_study: str = ""
    about: str = ""
    extracurricular_activities: str = ""
    nominee: Literal["mcm", "wcw"] = "mcm"
    image_url: str = ""

    def validation_errors(self, has_image_file: bool = False) -> dict[str, str]:
        """Field name -> message for every field that fails; empty when the form is valid."""
        errors = {}
        if not self.full_name.strip():
            errors["full_name"] = "Full name is required"
        if not self.university:
            errors["university"] = "University is required"
        if not self.course.strip():
            errors["course"] = "Course is required"
        if not self.year_of_study:
            errors["year_of_study"] = "Year of study is required"
        if not self.about.strip():
            errors["about"] = "About section is required"
        elif len(self.about.strip()) < ABOUT_MIN_LENGTH:
            errors["about"] = f"About section must be at least {ABOUT_MIN_LENGTH} characters"
        if not self.extracurricular_activities.strip():
            errors["extracurricular_activities"] = "Extracurricular activities are required"
        if not has_image_file and not self.image_url:
            errors["image"] = "A high-quality image is required"
        return errors

    def interests(self) -> list[str]:
        return [a.strip() for a in self.extracurricular_activities.split(",") if a.strip()]

    def to_nominee(self, image_url: str) -> dict:
        """Fields of the spotlight record created for this nomination (id excluded)."""
        return {
            "name": self.full_name,
            "major": self.course,
            "bio": f"{self.about}\n\nExtracurricular Activities: {self.extracurricular_activities}",
            "image_url": image_url,
            "university_id": self.university,
            "gender": "male" if self.nominee == "mcm" else "female",
            "votes": 0,
            "is_winner": False,
            "interests": self.interests(),
        }
