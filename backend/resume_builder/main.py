from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import asyncio

from resume_builder.auth import (
    create_token, get_current_user, hash_password, public_user, verify_password,
)
from resume_builder.config import get_settings
from resume_builder.models import (
    AuthResponse, LoginRequest, RegisterRequest, ResumeCreate, ResumeUpdate, default_resume_data, sent_fields,
)
from resume_builder.uploads import upload_dir


@asynccontextmanager
async def lifespan(app: FastAPI):
    print(f"[startup] Serving uploads from {upload_dir().resolve()}")
    yield


app = FastAPI(title="Resume Builder API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/uploads", StaticFiles(directory=upload_dir()), name="uploads")


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.get("/")
def root():
    return {"message": "API WORKING"}


@app.get("/health")
async def health():
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

@app.post("/api/auth/register", response_model=AuthResponse, status_code=201)
async def register(request: RegisterRequest):
    """Create an account and return a bearer token."""
    from resume_builder.database import create_user, get_user_by_email
    from resume_builder.formatting import validate_email

    email = request.email.strip().lower()
    if not validate_email(email):
        raise HTTPException(status_code=400, detail="Invalid email address")

    settings = get_settings()
    if len(request.password) < settings.password_min_length:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {settings.password_min_length} characters",
        )

    try:
        if await get_user_by_email(email):
            raise HTTPException(status_code=400, detail="User already exists")

        user = await create_user({
            "name": request.name.strip(),
            "email": email,
            "password": hash_password(request.password),
        })
        return AuthResponse(
            id=str(user["id"]),
            name=user["name"],
            email=user["email"],
            token=create_token(user["id"]),
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Registration failed: {str(e)}")


@app.post("/api/auth/login", response_model=AuthResponse)
async def login(request: LoginRequest):
    from resume_builder.database import get_user_by_email

    try:
        user = await get_user_by_email(request.email.strip().lower())
        if not user or not verify_password(request.password, user.get("password", "")):
            raise HTTPException(status_code=401, detail="Invalid email or password")

        return AuthResponse(
            id=str(user["id"]),
            name=user["name"],
            email=user["email"],
            token=create_token(user["id"]),
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Login failed: {str(e)}")


@app.get("/api/auth/profile")
async def profile(user: dict = Depends(get_current_user)):
    from resume_builder.database import get_user_by_id

    fresh = await get_user_by_id(user["id"])
    if not fresh:
        raise HTTPException(status_code=404, detail="User not found")
    return public_user(fresh)


# ---------------------------------------------------------------------------
# Resumes
# ---------------------------------------------------------------------------

async def _owned_resume(resume_id: str, user: dict) -> dict:
    """Fetch a resume the user owns, or 404."""
    from resume_builder.database import get_resume
    resume = await get_resume(resume_id, user["id"])
    if not resume:
        raise HTTPException(status_code=404, detail="Resume not found")
    return resume


@app.post("/api/resume", status_code=201)
async def create_resume_endpoint(request: ResumeCreate, user: dict = Depends(get_current_user)):
    """Create a resume from the blank template, overlaid with whatever the client sent."""
    from resume_builder.database import save_resume
    try:
        data = {
            **default_resume_data(),
            **sent_fields(request),
            "user_id": user["id"],
        }
        return await save_resume(data)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating resume: {str(e)}")


@app.get("/api/resume")
async def list_resumes(user: dict = Depends(get_current_user)):
    from resume_builder.database import get_resumes
    try:
        return await get_resumes(user["id"])
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching resumes: {str(e)}")


@app.get("/api/resume/{resume_id}")
async def get_resume_detail(resume_id: str, user: dict = Depends(get_current_user)):
    try:
        return await _owned_resume(resume_id, user)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching resume: {str(e)}")


@app.put("/api/resume/{resume_id}")
async def update_resume_endpoint(
    resume_id: str,
    request: ResumeUpdate,
    user: dict = Depends(get_current_user),
):
    """Partial update: top-level fields the client sent replace the stored ones."""
    from resume_builder.database import update_resume
    try:
        await _owned_resume(resume_id, user)
        changes = sent_fields(request)
        return await update_resume(resume_id, user["id"], changes)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update resume: {str(e)}")


@app.delete("/api/resume/{resume_id}")
async def delete_resume_endpoint(resume_id: str, user: dict = Depends(get_current_user)):
    """Delete a resume and its stored thumbnail/profile images."""
    from resume_builder.database import delete_resume
    from resume_builder.uploads import delete_stored
    try:
        resume = await _owned_resume(resume_id, user)
        delete_stored(resume.get("thumbnail_link"))
        delete_stored((resume.get("profile_info") or {}).get("profile_preview_url"))
        await delete_resume(resume_id, user["id"])
        return {"message": "Resume deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to delete resume: {str(e)}")


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

async def _read_image(upload: UploadFile) -> bytes:
    from resume_builder.uploads import ALLOWED_IMAGE_TYPES
    if upload.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"file upload failed: unsupported type {upload.content_type}",
        )
    return await upload.read()


@app.put("/api/resume/{resume_id}/upload-images")
async def upload_resume_images(
    resume_id: str,
    request: Request,
    thumbnail: UploadFile | None = File(None),
    profile_image: UploadFile | None = File(None),
    user: dict = Depends(get_current_user),
):
    """Replace a resume's thumbnail and/or profile image."""
    from resume_builder.database import update_resume
    from resume_builder.image_utils import get_light_color_from_image, optimize_thumbnail
    from resume_builder.uploads import delete_stored, public_url, save_bytes

    try:
        resume = await _owned_resume(resume_id, user)
        settings = get_settings()

        # Validate everything before touching storage
        thumbnail_data = None
        if thumbnail is not None:
            thumbnail_data = optimize_thumbnail(await _read_image(thumbnail), settings.thumbnail_max_width)
        profile_data = None
        if profile_image is not None:
            profile_data = await _read_image(profile_image)

        base_url = str(request.base_url)
        changes = {}
        saved = []
        replaced = []
        accent_color = None

        if thumbnail_data is not None:
            filename = save_bytes(thumbnail_data, thumbnail.filename or "thumbnail.png")
            saved.append(filename)
            replaced.append(resume.get("thumbnail_link"))
            changes["thumbnail_link"] = public_url(base_url, filename)

        if profile_data is not None:
            profile_info = dict(resume.get("profile_info") or {})
            filename = save_bytes(profile_data, profile_image.filename or "profile.png")
            saved.append(filename)
            replaced.append(profile_info.get("profile_preview_url"))
            profile_info["profile_preview_url"] = public_url(base_url, filename)
            changes["profile_info"] = profile_info
            accent_color = get_light_color_from_image(profile_data)

        if changes:
            try:
                resume = await update_resume(resume_id, user["id"], changes) or {**resume, **changes}
            except Exception:
                for filename in saved:
                    delete_stored(filename)
                raise
            # Old files go only once the row points at the new ones
            for link in replaced:
                delete_stored(link)

        return {
            "message": "Images uploaded successfully",
            "thumbnail_link": resume.get("thumbnail_link"),
            "profile_preview_url": (resume.get("profile_info") or {}).get("profile_preview_url"),
            "accent_color": accent_color,
        }
    except HTTPException:
        raise
    except Exception as e:
        print(f"[uploads] Error uploading images: {e}")
        raise HTTPException(status_code=500, detail=f"fail to upload images: {str(e)}")


@app.post("/api/resume/{resume_id}/thumbnail")
async def generate_thumbnail(resume_id: str, request: Request, user: dict = Depends(get_current_user)):
    """Render the resume in headless Chromium and store the capture as its thumbnail."""
    from resume_builder.database import update_resume
    from resume_builder.export import ExportError, RenderFailure
    from resume_builder.image_utils import optimize_thumbnail
    from resume_builder.render import render_resume_thumbnail
    from resume_builder.uploads import delete_stored, public_url, save_bytes

    resume = await _owned_resume(resume_id, user)
    settings = get_settings()
    try:
        packaged = await asyncio.wait_for(
            render_resume_thumbnail(resume),
            timeout=settings.capture_timeout,
        )
    except asyncio.TimeoutError:
        raise HTTPException(status_code=504, detail="Thumbnail capture timed out")
    except RenderFailure as e:
        raise HTTPException(status_code=502, detail=f"Thumbnail render failed: {str(e)}")
    except ExportError as e:
        raise HTTPException(status_code=500, detail=f"Thumbnail export failed: {str(e)}")
    except Exception as e:
        print(f"[thumbnail] Capture failed for {resume_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Thumbnail export failed: {str(e)}")

    try:
        data = optimize_thumbnail(packaged.data, settings.thumbnail_max_width)
        filename = save_bytes(data, packaged.name)
        link = public_url(str(request.base_url), filename)
        try:
            await update_resume(resume_id, user["id"], {"thumbnail_link": link})
        except Exception:
            delete_stored(filename)
            raise
        delete_stored(resume.get("thumbnail_link"))
        return {"thumbnail_link": link}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to store thumbnail: {str(e)}")
