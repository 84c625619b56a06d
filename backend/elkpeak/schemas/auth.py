from typing import Any, Optional

from pydantic import BaseModel


class AuthVerifyRequest(BaseModel):
    # Typed loosely so a missing or non-string password gets the endpoint's own message.
    password: Optional[Any] = None
