"""
Async HTTP client for the resume API.

Used to hand a packaged export (PackagedFile) to the upload endpoint, and by
scripts that drive the API end to end.
"""

import httpx

from resume_builder.export.packager import PackagedFile

API_PATHS = {
    "auth": {
        "login": "/api/auth/login",
        "register": "/api/auth/register",
        "profile": "/api/auth/profile",
    },
    "resume": {
        "create": "/api/resume",
        "get_all": "/api/resume",
        "get_by_id": "/api/resume/{id}",
        "update": "/api/resume/{id}",
        "delete": "/api/resume/{id}",
        "upload_images": "/api/resume/{id}/upload-images",
        "thumbnail": "/api/resume/{id}/thumbnail",
    },
}


class ResumeApiClient:
    def __init__(self, base_url: str = "http://localhost:8000", token: str | None = None,
                 timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None):
        self.token = token
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def _request(self, method: str, path: str, **kwargs):
        resp = await self._client.request(method, path, headers=self._headers(), **kwargs)
        resp.raise_for_status()
        return resp.json()

    # --- auth ---

    async def register(self, name: str, email: str, password: str) -> dict:
        data = await self._request("POST", API_PATHS["auth"]["register"],
                                   json={"name": name, "email": email, "password": password})
        self.token = data["token"]
        return data

    async def login(self, email: str, password: str) -> dict:
        data = await self._request("POST", API_PATHS["auth"]["login"],
                                   json={"email": email, "password": password})
        self.token = data["token"]
        return data

    async def get_profile(self) -> dict:
        return await self._request("GET", API_PATHS["auth"]["profile"])

    # --- resumes ---

    async def create_resume(self, title: str, **fields) -> dict:
        return await self._request("POST", API_PATHS["resume"]["create"], json={"title": title, **fields})

    async def list_resumes(self) -> list:
        return await self._request("GET", API_PATHS["resume"]["get_all"])

    async def get_resume(self, resume_id: str) -> dict:
        return await self._request("GET", API_PATHS["resume"]["get_by_id"].format(id=resume_id))

    async def update_resume(self, resume_id: str, **fields) -> dict:
        return await self._request("PUT", API_PATHS["resume"]["update"].format(id=resume_id), json=fields)

    async def delete_resume(self, resume_id: str) -> dict:
        return await self._request("DELETE", API_PATHS["resume"]["delete"].format(id=resume_id))

    async def upload_images(self, resume_id: str, thumbnail: PackagedFile | None = None,
                            profile_image: PackagedFile | None = None) -> dict:
        """Multipart upload of a thumbnail and/or profile image. Returns the stored links."""
        files = {}
        if thumbnail is not None:
            files["thumbnail"] = thumbnail.as_multipart()
        if profile_image is not None:
            files["profile_image"] = profile_image.as_multipart()
        if not files:
            raise ValueError("upload_images needs a thumbnail or a profile_image")
        return await self._request("PUT", API_PATHS["resume"]["upload_images"].format(id=resume_id), files=files)

    async def generate_thumbnail(self, resume_id: str) -> dict:
        return await self._request("POST", API_PATHS["resume"]["thumbnail"].format(id=resume_id))
