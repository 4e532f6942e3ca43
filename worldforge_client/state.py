# Client session state for the Worldforge API client
from dataclasses import dataclass
from typing import Optional


@dataclass
class ClientState:
    """Authentication state shared by the client services"""

    # Supabase session token sent as the bearer credential
    access_token: Optional[str] = None
