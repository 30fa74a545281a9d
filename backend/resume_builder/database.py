"""
Supabase client for user and resume record CRUD.
"""

from datetime import datetime, timezone

from resume_builder.config import get_settings


def _get_client():
    """Get a Supabase client. Raises if credentials are missing."""
    settings = get_settings()
    url = settings.supabase_url
    key = settings.supabase_key
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set in .env")
    from supabase import create_client
    return create_client(url, key)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

async def create_user(data: dict) -> dict:
    """Insert a user record. Returns the inserted row."""
    client = _get_client()
    result = client.table("users").insert(data).execute()
    return result.data[0] if result.data else {}


async def get_user_by_email(email: str) -> dict | None:
    client = _get_client()
    result = client.table("users").select("*").eq("email", email).limit(1).execute()
    return result.data[0] if result.data else None


async def get_user_by_id(user_id: str) -> dict | None:
    client = _get_client()
    result = client.table("users").select("*").eq("id", user_id).limit(1).execute()
    return result.data[0] if result.data else None


# ---------------------------------------------------------------------------
# Resumes
# ---------------------------------------------------------------------------

async def save_resume(data: dict) -> dict:
    """Insert a resume record. Returns the inserted row."""
    client = _get_client()
    now = _now()
    row = {"created_at": now, "updated_at": now, **data}
    result = client.table("resumes").insert(row).execute()
    return result.data[0] if result.data else {}


async def get_resumes(user_id: str) -> list:
    """Get a user's resumes, most recently updated first."""
    client = _get_client()
    result = (
        client.table("resumes")
        .select("*")
        .eq("user_id", user_id)
        .order("updated_at", desc=True)
        .execute()
    )
    return result.data


async def get_resume(resume_id: str, user_id: str) -> dict | None:
    """Get a single resume owned by user_id, or None."""
    client = _get_client()
    result = (
        client.table("resumes")
        .select("*")
        .eq("id", resume_id)
        .eq("user_id", user_id)
        .limit(1)
        .execute()
    )
    return result.data[0] if result.data else None


async def update_resume(resume_id: str, user_id: str, data: dict) -> dict:
    """Update a resume record. Bumps updated_at."""
    client = _get_client()
    result = (
        client.table("resumes")
        .update({**data, "updated_at": _now()})
        .eq("id", resume_id)
        .eq("user_id", user_id)
        .execute()
    )
    return result.data[0] if result.data else {}


async def delete_resume(resume_id: str, user_id: str) -> bool:
    """Delete a resume record."""
    client = _get_client()
    client.table("resumes").delete().eq("id", resume_id).eq("user_id", user_id).execute()
    return True
