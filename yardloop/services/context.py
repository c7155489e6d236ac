from dataclasses import dataclass

from yardloop.services.exceptions import NotAuthenticated


@dataclass(frozen=True)
class RequestContext:
    """
    Who is calling. Built once per request by the API layer and passed
    explicitly into every service call.
    """

    user_id: int | None = None
    username: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def require_user(self, action: str = "do this") -> int:
        if self.user_id is None:
            raise NotAuthenticated(f"Must be logged in to {action}.")
        return self.user_id


ANONYMOUS = RequestContext()
