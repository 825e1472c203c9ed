# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""OncePerRequestFilter — WebFilter base class with URL-pattern matching.

Reads ``request.url.path`` through attribute access, so no Starlette import
is needed here.
"""

from __future__ import annotations

import abc
from fnmatch import fnmatch
from typing import Any

from crossgate.web.ports.filter import CallNext


class OncePerRequestFilter(abc.ABC):
    """Abstract base class for :class:`WebFilter` implementations.

    Attributes:
        url_patterns: Glob patterns the filter applies to. Empty means all paths.
        exclude_patterns: Glob patterns skipped even when ``url_patterns`` match.
    """

    url_patterns: list[str] = []
    exclude_patterns: list[str] = []

    def should_not_filter(self, request: Any) -> bool:
        """Return ``True`` if the request path does not match this filter's patterns."""
        path: str = request.url.path

        if self.url_patterns and not any(fnmatch(path, p) for p in self.url_patterns):
            return True

        return bool(
            self.exclude_patterns and any(fnmatch(path, p) for p in self.exclude_patterns)
        )

    @abc.abstractmethod
    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        """Execute the filter logic. Call ``await call_next(request)`` to proceed."""
        ...
