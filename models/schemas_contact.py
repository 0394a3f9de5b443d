import re

from pydantic import BaseModel

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[\d\s\-+()]+$")
PHONE_MIN_DIGITS = 10


class ContactForm(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    subject: str = ""
    message: str = ""

    def validation_error(self) -> str | None:
        """First problem with the form, checked in the order the form shows it."""
        if not all(v.strip() for v in (self.name, self.email, self.phone, self.subject, self.message)):
            return "Please fill in all fields"
        if not EMAIL_PATTERN.match(self.email.strip()):
            return "Please enter a valid email address"
        phone = self.phone.strip()
        if not PHONE_PATTERN.match(phone) or len(re.sub(r"\D", "", phone)) < PHONE_MIN_DIGITS:
            return "Please enter a valid phone number"
        return None

    def to_submission(self, timestamp: str) -> dict:
        return {
            "name": self.name.strip(),
            "email": self.email.strip(),
            "phone": self.phone.strip(),
            "subject": self.subject.strip(),
            "message": self.message.strip(),
            "timestamp": timestamp,
            "read": False,
        }
