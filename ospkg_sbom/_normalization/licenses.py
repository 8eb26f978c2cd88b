"""License and hash clean-up for scanner components.

Scanners report OS package licenses as free-form display names taken from
package metadata (``GPLv2+``, ``Expat``, ``MIT License``). This module resolves
those names to SPDX identifiers where the mapping is exact, keeps the rest as
named licenses, and turns a lone compound name into a license expression.

CONSERVATIVE APPROACH: a name is only turned into an identifier when the alias
is exact or the name already is a known SPDX identifier (case-insensitive).
"""

import copy
import re
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

from cyclonedx.spdx import fixup_id
from license_expression import ExpressionError, get_spdx_licensing

from ospkg_sbom.logging_config import logger

# SPDX licensing instance for validation
_spdx_licensing = get_spdx_licensing()

# Digests shorter than this are scanner artifacts, not verifiable hashes
MIN_HASH_CONTENT_LENGTH = 32

LicenseLookup = Callable[[str], str]

# Exact, case-insensitive display-name aliases. Covers RPM spec files,
# DEP-5 short names and the usual prose spellings.
LICENSE_NAME_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        # RPM
        "gplv2": "GPL-2.0-only",
        "gplv2+": "GPL-2.0-or-later",
        "gplv3": "GPL-3.0-only",
        "gplv3+": "GPL-3.0-or-later",
        "gpl+": "GPL-1.0-or-later",
        "lgplv2": "LGPL-2.0-only",
        "lgplv2+": "LGPL-2.1-or-later",
        "lgplv2.1": "LGPL-2.1-only",
        "lgplv2.1+": "LGPL-2.1-or-later",
        "lgplv3": "LGPL-3.0-only",
        "lgplv3+": "LGPL-3.0-or-later",
        "agplv3": "AGPL-3.0-only",
        "agplv3+": "AGPL-3.0-or-later",
        "asl 2.0": "Apache-2.0",
        "asl 1.1": "Apache-1.1",
        "mplv1.1": "MPL-1.1",
        "mplv2.0": "MPL-2.0",
        "bsd with advertising": "BSD-4-Clause",
        "psfl": "Python-2.0",
        "boost": "BSL-1.0",
        # DEP-5
        "gpl-1": "GPL-1.0-only",
        "gpl-1+": "GPL-1.0-or-later",
        "gpl-2": "GPL-2.0-only",
        "gpl-2+": "GPL-2.0-or-later",
        "gpl-2.0+": "GPL-2.0-or-later",
        "gpl-3": "GPL-3.0-only",
        "gpl-3+": "GPL-3.0-or-later",
        "gpl-3.0+": "GPL-3.0-or-later",
        "lgpl-2": "LGPL-2.0-only",
        "lgpl-2+": "LGPL-2.0-or-later",
        "lgpl-2.0+": "LGPL-2.0-or-later",
        "lgpl-2.1": "LGPL-2.1-only",
        "lgpl-2.1+": "LGPL-2.1-or-later",
        "lgpl-3": "LGPL-3.0-only",
        "lgpl-3+": "LGPL-3.0-or-later",
        "lgpl-3.0+": "LGPL-3.0-or-later",
        "agpl-3": "AGPL-3.0-only",
        "agpl-3+": "AGPL-3.0-or-later",
        "apache-2": "Apache-2.0",
        "expat": "MIT",
        "zlib/libpng": "Zlib",
        "public-domain": "CC0-1.0",
        "boost-1.0": "BSL-1.0",
        "psf-2": "Python-2.0",
        # Prose spellings
        "mit license": "MIT",
        "the mit license": "MIT",
        "apache license 2.0": "Apache-2.0",
        "apache license, version 2.0": "Apache-2.0",
        "apache 2.0": "Apache-2.0",
        "new bsd license": "BSD-3-Clause",
        "simplified bsd license": "BSD-2-Clause",
        "isc license": "ISC",
        "mozilla public license 2.0": "MPL-2.0",
        "public domain": "CC0-1.0",
    }
)

_COMPOUND_PATTERN = re.compile(r" (AND|OR) ")


def validate_spdx_expression(license_str: str) -> bool:
    """
    Validate a license string against the SPDX license list.

    Args:
        license_str: License string to validate

    Returns:
        True if valid SPDX expression, False otherwise
    """
    if not license_str:
        return False

    if license_str.startswith("LicenseRef-"):
        return bool(re.match(r"^LicenseRef-[a-zA-Z0-9.\-]+$", license_str))

    try:
        parsed = _spdx_licensing.parse(license_str, validate=False)
        return len(_spdx_licensing.unknown_license_keys(parsed)) == 0
    except ExpressionError:
        return False


def find_license_id(name: str, aliases: Mapping[str, str] = LICENSE_NAME_ALIASES) -> str:
    """
    Resolve a license display name to an SPDX identifier.

    Args:
        name: License display name from the scanner
        aliases: Lower-cased display name to SPDX id mapping

    Returns:
        The SPDX identifier, or ``name`` unchanged when no exact mapping exists
    """
    if not name:
        return name

    stripped = name.strip()
    alias = aliases.get(stripped.lower())
    if alias:
        if validate_spdx_expression(alias):
            return alias
        logger.warning(f"License alias '{stripped}' maps to invalid SPDX ID '{alias}'")

    # Known SPDX id in the wrong case ("apache-2.0" -> "Apache-2.0")
    spdx_id = fixup_id(stripped)
    if spdx_id:
        return spdx_id

    return name


def is_compound_name(name: str) -> bool:
    """True when a license display name reads as an ``AND``/``OR`` expression."""
    return bool(_COMPOUND_PATTERN.search(name.upper()))


def normalize_licenses(
    licenses: List[Dict[str, Any]],
    lookup: LicenseLookup = find_license_id,
) -> List[Dict[str, Any]]:
    """
    Normalize a component's CycloneDX ``licenses`` list.

    Entries carrying a display ``license.name`` are rewritten:

    - the sole entry of a component whose name contains `` AND `` or `` OR ``
      becomes ``{"expression": name}``
    - a name the lookup resolves becomes ``{"license": {"id": resolved}}``
    - anything else stays ``{"license": {"name": name}}``

    Entries that already carry an id or an expression pass through unchanged;
    empty entries are dropped.

    Args:
        licenses: License entries from the scanner
        lookup: Display name to identifier function

    Returns:
        New list of license entries (input is not modified)
    """
    if not licenses or not isinstance(licenses, list):
        return licenses

    sole = len(licenses) == 1
    normalized: List[Dict[str, Any]] = []

    for entry in licenses:
        if not isinstance(entry, dict) or not entry:
            continue

        license_obj = entry.get("license")
        name = license_obj.get("name") if isinstance(license_obj, dict) else None

        if name:
            # A licenses array holds either expressions or id/name entries, never both
            if sole and is_compound_name(name):
                normalized.append({"expression": name})
                continue
            resolved = lookup(name)
            if resolved != name:
                normalized.append({"license": {"id": resolved}})
            else:
                normalized.append({"license": {"name": name}})
        elif entry.get("expression") or license_obj:
            normalized.append(copy.deepcopy(entry))

    return normalized


def should_drop_hashes(hashes: Optional[List[Dict[str, Any]]]) -> bool:
    """
    Decide whether a component's hashes are scanner artifacts.

    Only the first digest is inspected: when its content is missing or shorter
    than MIN_HASH_CONTENT_LENGTH the whole ``hashes`` field is dropped.
    An empty list has no first digest to judge and is kept as it is.
    """
    if not hashes or not isinstance(hashes, list):
        return False
    first = hashes[0]
    content = first.get("content") if isinstance(first, dict) else None
    return not content or len(content) < MIN_HASH_CONTENT_LENGTH
