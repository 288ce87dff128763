"""License headers placed at the top of generated modules."""

from __future__ import annotations

from buildlimits.exceptions import LicenseError
from buildlimits.types import LicenseType

ELASTIC_HEADER = """\
Copyright Elasticsearch B.V. and/or licensed to Elasticsearch B.V. under one
or more contributor license agreements. Licensed under the Elastic License;
you may not use this file except in compliance with the Elastic License."""

ASL2_HEADER = """\
Licensed to Elasticsearch B.V. under one or more contributor
license agreements. See the NOTICE file distributed with
this work for additional information regarding copyright
ownership. Elasticsearch B.V. licenses this file to you under
the Apache License, Version 2.0 (the "License"); you may
not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing,
software distributed under the License is distributed on an
"AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
KIND, either express or implied.  See the License for the
specific language governing permissions and limitations
under the License."""

HEADERS: dict[LicenseType, str] = {
    LicenseType.ELASTIC: ELASTIC_HEADER,
    LicenseType.ASL2: ASL2_HEADER,
}


def find_license(name: str) -> str:
    """Return the header text for a license name (case-insensitive)."""
    try:
        return HEADERS[LicenseType(name.strip().lower())]
    except ValueError as exc:
        known = ", ".join(t.value for t in LicenseType)
        msg = f"Unknown license: {name!r} (known: {known})"
        raise LicenseError(msg) from exc


def as_comment(header: str) -> list[str]:
    """Render header text as Python comment lines."""
    return [f"# {line}".rstrip() for line in header.splitlines()]
