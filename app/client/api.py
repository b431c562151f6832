"""HTTP client for the VoiceApp API."""

from typing import Any

import httpx


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class VoiceAppAPI:
    """Thin wrapper over the REST routes. Holds the bearer token once authenticated."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: str | None = None,
        http: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.token = token

    def close(self) -> None:
        self.http.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        response = self.http.request(method, path, headers=headers, **kwargs)
        if response.is_error:
            try:
                message = response.json().get("error") or response.reason_phrase
            except ValueError:
                message = response.text or response.reason_phrase
            raise ApiError(response.status_code, message)
        return response.json()

    # --- auth ---

    def signup(
        self,
        email: str,
        password: str,
        city: str | None = None,
        country: str | None = None,
    ) -> dict[str, Any]:
        data = self._request(
            "POST",
            "/api/auth/signup",
            json={"email": email, "password": password, "city": city, "country": country},
        )
        self.token = data["token"]
        return data

    def login(self, email: str, password: str) -> dict[str, Any]:
        data = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.token = data["token"]
        return data

    def verify(self, token: str) -> dict[str, Any]:
        return self._request("GET", "/api/auth/verify", params={"token": token})

    def update_profile(self, city: str | None = None, country: str | None = None) -> dict[str, Any]:
        return self._request("PUT", "/api/auth/update", json={"city": city, "country": country})["user"]

    def upload_profile_pic(self, data: bytes, filename: str, content_type: str = "image/png") -> str:
        files = {"profilePic": (filename, data, content_type)}
        return self._request("POST", "/api/user/profile-pic", files=files)["profilePic"]

    # --- voices ---

    def post_voice(self, data: bytes, filename: str = "voice.webm", content_type: str = "audio/webm") -> str:
        files = {"audio": (filename, data, content_type)}
        return self._request("POST", "/api/voice", files=files)["id"]

    def reply(
        self,
        voice_id: str,
        data: bytes,
        filename: str = "reply.webm",
        content_type: str = "audio/webm",
    ) -> str:
        files = {"audio": (filename, data, content_type)}
        return self._request("POST", f"/api/voice/{voice_id}/reply", files=files)["id"]

    def like(self, voice_id: str, like: bool = True) -> dict[str, Any]:
        return self._request("POST", f"/api/voice/{voice_id}/like", json={"like": like})

    def list_voices(self) -> list[dict[str, Any]]:
        return self._request("GET", "/api/voices")

    def list_my_voices(self) -> list[dict[str, Any]]:
        return self._request("GET", "/api/my-voices")

    def replies(self, voice_id: str) -> list[dict[str, Any]]:
        return self._request("GET", f"/api/voice/{voice_id}/replies")

    def delete_voice(self, voice_id: str) -> None:
        self._request("DELETE", f"/api/voice/{voice_id}")

    def fetch_audio(self, audio_url: str) -> bytes:
        """Download the bytes behind an ``audioUrl`` returned by the listings."""
        response = self.http.get(audio_url)
        if response.is_error:
            raise ApiError(response.status_code, "Audio not found")
        return response.content
