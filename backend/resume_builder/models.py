"""Request/response schemas and the default resume document."""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    id: str
    name: str
    email: str
    token: str


# ---------------------------------------------------------------------------
# Resume sections
# ---------------------------------------------------------------------------

class Template(BaseModel):
    theme: str = ""
    color_palette: list[str] = Field(default_factory=list)


class ProfileInfo(BaseModel):
    profile_preview_url: str = ""
    full_name: str = ""
    designation: str = ""
    summary: str = ""


class ContactInfo(BaseModel):
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""
    website: str = ""


class WorkExperience(BaseModel):
    company: str = ""
    role: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""


class Education(BaseModel):
    degree: str = ""
    institution: str = ""
    start_date: str = ""
    end_date: str = ""


class Skill(BaseModel):
    name: str = ""
    progress: int = 0


class Project(BaseModel):
    title: str = ""
    description: str = ""
    github: str = ""
    live_demo: str = ""


class Certification(BaseModel):
    title: str = ""
    issuer: str = ""
    year: str = ""


class Language(BaseModel):
    name: str = ""
    progress: int = 0


class ResumeUpdate(BaseModel):
    """Partial resume. Only fields the client sent are written."""
    title: str | None = None
    thumbnail_link: str | None = None
    template: Template | None = None
    profile_info: ProfileInfo | None = None
    contact_info: ContactInfo | None = None
    work_experience: list[WorkExperience] | None = None
    education: list[Education] | None = None
    skills: list[Skill] | None = None
    projects: list[Project] | None = None
    certifications: list[Certification] | None = None
    languages: list[Language] | None = None
    interests: list[str] | None = None


class ResumeCreate(ResumeUpdate):
    title: str


def default_resume_data() -> dict:
    """A blank resume: one empty entry per list section."""
    return {
        "thumbnail_link": "",
        "template": Template().model_dump(),
        "profile_info": ProfileInfo().model_dump(),
        "contact_info": ContactInfo().model_dump(),
        "work_experience": [WorkExperience().model_dump()],
        "education": [Education().model_dump()],
        "skills": [Skill().model_dump()],
        "projects": [Project().model_dump()],
        "certifications": [Certification().model_dump()],
        "languages": [Language().model_dump()],
        "interests": [""],
    }


def sent_fields(model: BaseModel) -> dict:
    """Top-level fields the client actually sent, each dumped in full."""
    data = model.model_dump()
    return {k: v for k, v in data.items() if k in model.model_fields_set}
