# cybertaxi/client/api_client.py
"""
HTTP client for the CyberTaxi API, used by the map renderer and scripts.

Stores the username/password it logged in with. When a protected call comes
back 401/403 (expired or rejected token) it logs in again once and repeats
the call once. A second failure is raised as ClientError with a message fit
for showing to the player.
"""

from typing import Optional

import requests

from cybertaxi.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000/api"
SESSION_EXPIRED_MESSAGE = "Session expired. Please log in again."


class ClientError(Exception):
    """User-visible failure from the API client."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class CyberTaxiClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.token: Optional[str] = None
        self.player_id: Optional[int] = None
        self.username: Optional[str] = None
        self._password: Optional[str] = None

    # ── Low level ────────────────────────────────────────────────────────────

    def _send(self, method: str, path: str, auth: bool = True, **kwargs) -> requests.Response:
        headers = {"Content-Type": "application/json"}
        if auth and self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            return self.session.request(method, f"{self.base_url}{path}", headers=headers,
                                        timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ClientError(f"Cannot reach CyberTaxi server: {e}")

    @staticmethod
    def _payload(response: requests.Response) -> dict:
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not response.ok:
            message = data.get("message") if isinstance(data, dict) else None
            raise ClientError(message or f"HTTP {response.status_code}", response.status_code)
        return data

    def _authorized(self, method: str, path: str, **kwargs) -> dict:
        """Protected call with one refresh-and-retry cycle on 401/403."""
        if not self.token:
            raise ClientError("Authentication required. Please log in.", 401)
        response = self._send(method, path, **kwargs)
        if response.status_code in (401, 403):
            logger.warning(f"{method} {path} → {response.status_code}, refreshing token")
            self.refresh_token()
            response = self._send(method, path, **kwargs)
            if response.status_code in (401, 403):
                self.logout()
                raise ClientError(SESSION_EXPIRED_MESSAGE, response.status_code)
        return self._payload(response)

    # ── Auth ─────────────────────────────────────────────────────────────────

    def signup(self, username: str, email: str, password: str) -> dict:
        data = self._payload(self._send("POST", "/auth/signup", auth=False, json={
            "username": username, "email": email, "password": password,
        }))
        self._remember(data["token"], data["player_id"], username, password)
        return data

    def login(self, username: str, password: str) -> dict:
        data = self._payload(self._send("POST", "/auth/login/username", auth=False, json={
            "username": username, "password": password,
        }))
        self._remember(data["token"], data["player_id"], username, password)
        return data

    def refresh_token(self):
        if not self.username or not self._password:
            self.logout()
            raise ClientError(SESSION_EXPIRED_MESSAGE, 401)
        try:
            self.login(self.username, self._password)
        except ClientError:
            self.logout()
            raise ClientError(SESSION_EXPIRED_MESSAGE, 401)
        logger.info(f"Token refreshed for {self.username}")

    def logout(self):
        self.token = None
        self.player_id = None
        self._password = None

    def _remember(self, token: str, player_id: int, username: str, password: str):
        self.token = token
        self.player_id = player_id
        self.username = username
        self._password = password

    # ── Resources ────────────────────────────────────────────────────────────

    def fetch_player_vehicles(self, status: Optional[str] = None) -> list:
        params = {"status": status} if status else None
        return self._authorized("GET", f"/player/{self.username}/vehicles", params=params).get("vehicles", [])

    def fetch_other_vehicles(self, status: Optional[str] = "active") -> list:
        params = {"status": status} if status else None
        return self._authorized("GET", "/vehicles/others", params=params).get("vehicles", [])

    def fetch_player_garages(self) -> list:
        return self._authorized("GET", f"/player/{self.username}/garages").get("garages", [])

    def get_balance(self) -> float:
        return self._authorized("GET", f"/player/{self.username}/balance")["bank_balance"]

    def get_slots(self) -> dict:
        data = self._authorized("GET", f"/player/{self.username}/slots")
        return {key: data[key] for key in ("total_slots", "used_slots", "available_slots")}

    def purchase_vehicle(self, vehicle_type: str, cost: float, coords, status: str = "new",
                         dest=None) -> dict:
        body = {"type": vehicle_type, "cost": cost, "coords": list(coords), "status": status}
        if dest is not None:
            body["dest"] = list(dest)
        return self._authorized("POST", "/vehicles", json=body)
