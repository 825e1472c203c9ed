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
"""Startup wiring for the CORS policy.

Reads ``crossgate.web.cors.*`` from :class:`~crossgate.core.config.Config`,
builds the immutable policy once and hands it to the filter chain.
"""

from __future__ import annotations

import structlog

from crossgate.config.properties.cors import CorsProperties
from crossgate.core.config import Config
from crossgate.cors.policy import CorsPolicy
from crossgate.kernel.exceptions import ConfigurationException
from crossgate.logging.port import LoggingPort
from crossgate.logging.structlog_adapter import StructlogAdapter
from crossgate.web.adapters.starlette.cors_filter import CorsFilter

logger = structlog.get_logger("crossgate.web")


def cors_policy_from_config(config: Config) -> CorsPolicy:
    """Build the process-wide CORS policy, failing fast on bad configuration."""
    try:
        policy = CorsPolicy.from_properties(config.bind(CorsProperties))
    except ConfigurationException as exc:
        logger.error("cors_configuration_invalid", error=str(exc), code=exc.code, context=exc.context)
        raise

    logger.info(
        "cors_policy_configured",
        allowed_origins=list(policy.allowed_origins),
        allowed_methods=list(policy.allowed_methods),
        allow_credentials=policy.allow_credentials,
        max_age=policy.max_age,
    )
    return policy


def cors_filter_from_config(config: Config) -> CorsFilter:
    return CorsFilter(cors_policy_from_config(config))


def initialize_cors(config: Config, logging_port: LoggingPort | None = None) -> CorsPolicy:
    """Process startup: configure logging from ``crossgate.logging.*``, then build the policy.

    Args:
        config: Loaded configuration.
        logging_port: Logging backend; defaults to :class:`StructlogAdapter`.
    """
    logging_port = logging_port or StructlogAdapter()
    logging_port.configure(config)
    logging_port.get_logger("crossgate.core").debug("configuration_loaded", sources=config.loaded_sources)
    return cors_policy_from_config(config)
