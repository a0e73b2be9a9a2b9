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
"""Per-call transformation state: settings snapshot, cycle and depth guards."""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from typing import Any

from pybeans.kernel.exceptions import CyclicGraphError, DepthExceededError
from pybeans.transformer.settings import TransformerSettings


class TransformationContext:
    """State owned by one ``transform`` call and discarded when it returns.

    ``_visiting`` holds the ids of the source objects on the current path
    (insertion-ordered, O(1) lookup), so a shared but acyclic sub-object
    may be visited more than once while a back-reference is rejected.
    """

    def __init__(self, settings: TransformerSettings) -> None:
        self.settings = settings
        self.depth = 0
        self._visiting: dict[int, None] = {}
        self._dest_types: list[type] = []

    @property
    def max_depth(self) -> int:
        return self.settings.max_depth

    @property
    def dest_types(self) -> tuple[type, ...]:
        """Destination types under construction, outermost first."""
        return tuple(self._dest_types)

    def is_visiting(self, source: Any) -> bool:
        return id(source) in self._visiting

    @contextlib.contextmanager
    def enter(self, source: Any, dest_type: type, *, track_identity: bool = True) -> Iterator[None]:
        """Guard one (nested) session building *dest_type* from *source*.

        Raises:
            CyclicGraphError: *source* is already on the current path.
            DepthExceededError: nesting would go beyond ``max_depth``.
        """
        if track_identity and id(source) in self._visiting:
            raise CyclicGraphError(source)
        if self.depth >= self.max_depth and self._dest_types:
            raise DepthExceededError(self.max_depth)

        key = id(source)
        if track_identity:
            self._visiting[key] = None
        self._dest_types.append(dest_type)
        self.depth = len(self._dest_types) - 1
        try:
            yield
        finally:
            self._dest_types.pop()
            self.depth = max(len(self._dest_types) - 1, 0)
            if track_identity:
                self._visiting.pop(key, None)
