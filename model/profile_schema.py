from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, model_validator

# blank or whitespace-only values are rejected; surrounding spaces are dropped
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Phone = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=20)]
Specialization = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class ProfilePatch(BaseModel):
    """Partial update: a field left out of the body is not touched.

    A field sent explicitly as null is rejected rather than clearing the column.
    """

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        nulls = [name for name in self.model_fields_set if getattr(self, name) is None]
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(sorted(nulls))}")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


# ---------------- Patients ----------------
class CreatePatientRequest(BaseModel):
    first_name: Name
    last_name: Name
    date_of_birth: date
    email: EmailStr
    phone_number: Phone
    password: str = Field(min_length=6, max_length=72)


class UpdatePatientRequest(ProfilePatch):
    first_name: Optional[Name] = None
    last_name: Optional[Name] = None
    date_of_birth: Optional[date] = None
    email: Optional[EmailStr] = None
    phone_number: Optional[Phone] = None


class PatientView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    date_of_birth: date
    email: str
    phone_number: str
    created_at: datetime


# ---------------- Doctors ----------------
class CreateDoctorRequest(BaseModel):
    first_name: Name
    last_name: Name
    specialization: Specialization
    email: EmailStr
    phone_number: Phone
    password: str = Field(min_length=6, max_length=72)


class UpdateDoctorRequest(ProfilePatch):
    first_name: Optional[Name] = None
    last_name: Optional[Name] = None
    specialization: Optional[Specialization] = None
    email: Optional[EmailStr] = None
    phone_number: Optional[Phone] = None


class DoctorView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    specialization: str
    email: str
    phone_number: str
    created_at: datetime


class DoctorSummary(BaseModel):
    id: str
    name: str
    specialty: str
