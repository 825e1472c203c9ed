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
"""CORS configuration properties (crossgate.web.cors.*)."""

from __future__ import annotations

from pydantic import BaseModel, Field

from crossgate.core.config import config_properties


@config_properties(prefix="crossgate.web.cors")
class CorsProperties(BaseModel):
    """Raw CORS settings as they appear in configuration.

    ``allowed_origins`` is the comma-separated origin list, bound from
    ``crossgate.web.cors.allowed-origins`` or ``CROSSGATE_WEB_CORS_ALLOWED_ORIGINS``.
    Validated when bound, so a non-numeric or negative max-age fails at startup.
    """

    allowed_origins: str | None = None
    allow_credentials: bool = True
    max_age: int = Field(default=3600, ge=0)
