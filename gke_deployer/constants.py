# /*
# Copyright 2026 The Kubernetes Authors.
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
# */

"""Constants, endpoint table loading, and wrapped-tool names."""

from __future__ import annotations

import re
from pathlib import Path

import yaml


def load_endpoints() -> dict[str, str]:
    """Load the well-known environment endpoints from environments.yaml.

    Returns:
        Mapping of environment name to container API endpoint URL.
    """
    endpoints_file = Path(__file__).resolve().parent / "environments.yaml"
    with open(endpoints_file) as f:
        return dict(yaml.safe_load(f)["endpoints"])


ENDPOINTS = load_endpoints()

# Literal endpoints are accepted when they look like an https URL ending in a slash.
URL_PATTERN = re.compile(r"https://.*/")

DEFAULT_ENVIRONMENT = "prod"

# -- Wrapped tool --
DEFAULT_GCLOUD = "gcloud"
CONTAINER_GROUP = "container"

# -- Wrapped tool runtime context --
ENV_PRINT_TRACEBACKS = "CLOUDSDK_CORE_PRINT_UNHANDLED_TRACEBACKS"
ENV_CONTAINER_ENDPOINT = "CLOUDSDK_API_ENDPOINT_OVERRIDES_CONTAINER"
ENV_KUBECONFIG = "KUBECONFIG"

# -- SSH key material --
SSH_DIR = ".ssh"
SSH_KEY_NAME = "google_compute_engine"
SSH_PUBLIC_SUFFIX = ".pub"

PROJECT_NUMBER_FORMAT = "value(projectNumber)"
