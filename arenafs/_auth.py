from ._exceptions import AFSUnauthorizedError


class OwnerCheck:
    """Only the namespace owner may mutate it.

    With ``owner=None`` every caller is accepted.
    """

    def __init__(self, owner: str | None = None) -> None:
        self._owner = owner

    @property
    def owner(self) -> str | None:
        return self._owner

    def check(self, caller: str | None) -> None:
        if self._owner is None:
            return
        if caller != self._owner:
            raise AFSUnauthorizedError(caller)
