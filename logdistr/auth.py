"""Access control backed by a CSV policy of (subject, object, action) rules."""

from __future__ import annotations

import csv
import os


class PermissionDeniedError(PermissionError):
    """Raised when a subject may not perform an action on an object."""

    def __init__(self, subject: str, obj: str, action: str) -> None:
        super().__init__(f"{subject} not permitted to {action} to {obj}")
        self.subject = subject
        self.object = obj
        self.action = action

    def __reduce__(self):
        return (type(self), (self.subject, self.object, self.action))


class Authorizer:
    """Allows exactly the requests listed as ``p, subject, object, action`` lines."""

    def __init__(self, policy_file: str | os.PathLike) -> None:
        self.policy_file = os.fspath(policy_file)
        self._rules: set[tuple[str, str, str]] = set()
        with open(self.policy_file, newline="", encoding="utf-8") as handle:
            for row in csv.reader(handle, skipinitialspace=True):
                fields = [field.strip() for field in row]
                if not fields or fields[0].startswith("#"):
                    continue
                if fields[0] == "p" and len(fields) >= 4:
                    self._rules.add((fields[1], fields[2], fields[3]))

    def authorize(self, subject: str, obj: str, action: str) -> None:
        """Raise PermissionDeniedError unless the policy allows the request."""
        if (subject, obj, action) not in self._rules:
            raise PermissionDeniedError(subject, obj, action)