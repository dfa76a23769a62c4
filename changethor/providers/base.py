"""Abstract base classes for the issue tracker and the change ticket system."""

from abc import ABC, abstractmethod

from changethor.models import ChangeRequest, ChangeResponse, Issue


class IssueTracker(ABC):
    @abstractmethod
    def get_issue(self, issue_key: str) -> Issue | None: ...

    def close(self) -> None:
        return None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ChangeSystem(ABC):
    @abstractmethod
    def submit(self, request: ChangeRequest) -> ChangeResponse | None: ...

    def close(self) -> None:
        return None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
