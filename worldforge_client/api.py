# HTTP access to the Worldforge API
import asyncio
import json
from typing import Any, Dict, Optional

import requests

from worldforge_client.state import ClientState


class APIError(Exception):
    """Exception raised for API errors"""
    def __init__(self, status_code: int, detail: str, body: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.detail = detail
        self.body = body or {}
        super().__init__(f"API Error ({status_code}): {detail}")


class ApiClient:
    """
    Thin wrapper over ``requests``. Calls run in a worker thread so the
    coroutine can be awaited, and cancelled, like any other task.
    """

    def __init__(self, api_url: str, state: Optional[ClientState] = None, session: Optional[requests.Session] = None):
        self.api_url = api_url.rstrip("/")
        self.state = state or ClientState()
        self.session = session or requests.Session()

    def _get_headers(self) -> Dict[str, str]:
        """Get common headers for API requests"""
        headers = {"Accept": "application/json"}
        if self.state.access_token:
            headers["Authorization"] = f"Bearer {self.state.access_token}"
        return headers

    def _handle_response(self, response: requests.Response) -> Dict[str, Any]:
        """Process API response and handle errors"""
        if 200 <= response.status_code < 300:
            if response.status_code == 204:  # No content
                return {}
            try:
                return response.json()
            except json.JSONDecodeError:
                return {"message": response.text}

        try:
            body = response.json()
            detail = body.get("error") or body.get("detail") or "Unknown error"
        except (json.JSONDecodeError, AttributeError):
            body = None
            detail = response.text or "Unknown error"
        raise APIError(response.status_code, detail, body)

    async def request(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.api_url}{endpoint}"
        headers = self._get_headers()
        try:
            response = await asyncio.to_thread(self.session.request, method, url, headers=headers, **kwargs)
        except requests.RequestException as e:
            raise APIError(0, f"Request failed: {str(e)}")
        return self._handle_response(response)

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Make GET request to API"""
        return await self.request("GET", endpoint, params=params)

    async def post(self, endpoint: str, data: Optional[Dict[str, Any]] = None,
                   params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Make POST request to API"""
        return await self.request("POST", endpoint, json=data or {}, params=params)

    async def put(self, endpoint: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Make PUT request to API"""
        return await self.request("PUT", endpoint, json=data)

    async def delete(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Make DELETE request to API"""
        return await self.request("DELETE", endpoint, params=params)

    async def upload(self, endpoint: str, files: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
        """Make multipart POST request to API"""
        return await self.request("POST", endpoint, files=files, data=data)
