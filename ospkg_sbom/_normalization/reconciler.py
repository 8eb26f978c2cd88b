"""Identifier reconciliation for OS package components.

The scanner reports OS packages with inconsistent package-URLs: the type may
be the sentinel ``none``, the namespace may be missing, and the distro release
is either absent or encoded differently per distribution. The reconciler
rebuilds each component's package-URL from the scanned image's os-release
metadata so that every OS package carries a real type, ``distro`` and
``distro_name`` qualifiers, and a bom-ref derived from the corrected URL.
"""

import copy
import posixpath
from typing import Any, Dict, FrozenSet, Mapping, Optional, Set, Tuple
from urllib.parse import unquote

from packageurl import PackageURL

from ospkg_sbom.logging_config import logger

from .distro_aliases import DISTRO_ALIASES, lookup_alias
from .families import FamilyRegistry, MageiaOverride, create_default_family_registry
from .licenses import LicenseLookup, find_license_id, normalize_licenses, should_drop_hashes
from .models import OsReleaseInfo, ReconcileResult, ReconcileStatus

# Sentinel type the scanner uses when it cannot classify a package
UNKNOWN_PURL_TYPE = "none"

# Language package ecosystems; an OS scan is not authoritative for these
LANGUAGE_PURL_TYPES: FrozenSet[str] = frozenset(
    {
        "npm",
        "maven",
        "pypi",
        "cargo",
        "composer",
        "gem",
        "nuget",
        "pub",
        "hackage",
        "hex",
        "conan",
        "clojars",
        "github",
    }
)

# Property name suffixes for the upstream source package
SRC_NAME_SUFFIX = "SrcName"
SRC_VERSION_SUFFIX = "SrcVersion"


def purl_to_bom_ref(purl: PackageURL) -> str:
    """Percent-decoded package-URL string, used as the graph node key."""
    return unquote(purl.to_string())


def get_purl_type(purl: str) -> str:
    """
    Read the type segment of a package-URL string without fully parsing it.

    Args:
        purl: Package-URL string (``pkg:type/...``)

    Returns:
        Lower-cased type, or an empty string for non package-URLs
    """
    if not purl or not purl.startswith("pkg:"):
        return ""
    return purl[4:].lstrip("/").split("/", 1)[0].lower()


def split_group_name(raw_name: str) -> Tuple[str, str]:
    """
    Split a path-like component name into group and leaf name.

    ``"foo/bar"`` gives ``("foo", "bar")``; a name without a separator has an
    empty group.
    """
    raw_name = raw_name or ""
    group = posixpath.dirname(raw_name)
    if group == ".":
        group = ""
    return group, posixpath.basename(raw_name)


def extract_source_package(properties: Any) -> Tuple[Optional[str], Optional[str]]:
    """
    Extract the upstream source package name and version from component properties.

    Properties are matched by suffix (``aquasecurity:trivy:SrcName`` and
    similar); the last match wins.

    Returns:
        Tuple of (source name, source version); either may be None
    """
    src_name: Optional[str] = None
    src_version: Optional[str] = None
    if not isinstance(properties, list):
        return src_name, src_version

    for prop in properties:
        if not isinstance(prop, dict):
            continue
        prop_name = prop.get("name") or ""
        if prop_name.endswith(SRC_NAME_SUFFIX):
            src_name = prop.get("value")
        elif prop_name.endswith(SRC_VERSION_SUFFIX):
            src_version = prop.get("value")
    return src_name, src_version


class IdentifierReconciler:
    """
    Reconcile raw scanner components against the image's os-release metadata.

    Lookup tables are injected at construction so tests can use their own.

    Example:
        reconciler = IdentifierReconciler(OsReleaseInfo.from_mapping({"ID": "ubuntu", "VERSION_ID": "20.04"}))
        result = reconciler.reconcile({"name": "libfoo", "version": "1.0", "purl": "pkg:none/libfoo@1.0"})
        result.component["purl"]  # "pkg:deb/libfoo@1.0?distro=ubuntu-20.04&distro_name=focal"
    """

    def __init__(
        self,
        os_release: Optional[OsReleaseInfo] = None,
        aliases: Mapping[str, str] = DISTRO_ALIASES,
        families: Optional[FamilyRegistry] = None,
        license_lookup: LicenseLookup = find_license_id,
        excluded_types: FrozenSet[str] = LANGUAGE_PURL_TYPES,
    ) -> None:
        self.os_release = os_release or OsReleaseInfo()
        self.aliases = aliases
        self.families = families or create_default_family_registry()
        self.license_lookup = license_lookup
        self.excluded_types = excluded_types
        self._mageia = MageiaOverride()

    def is_supported(self, raw: Mapping[str, Any]) -> bool:
        """True for components with a package-URL outside the language ecosystems."""
        purl = raw.get("purl")
        if not purl:
            return False
        return get_purl_type(purl) not in self.excluded_types

    def reconcile(self, raw: Mapping[str, Any]) -> ReconcileResult:
        """
        Reconcile a single raw component.

        Never raises for malformed package-URLs: such components come back
        with status PASSTHROUGH, their name split but identifiers untouched.

        Args:
            raw: Component dict from the scanner's CycloneDX document

        Returns:
            ReconcileResult with the normalized component, optional source
            component and the observed type tags
        """
        if not self.is_supported(raw):
            logger.debug(f"Skipping non-OS component: {raw.get('purl') or raw.get('name')}")
            return ReconcileResult.skipped_result()

        component = copy.deepcopy(dict(raw))
        group, name = split_group_name(component.get("name", ""))
        # Already-normalized components carry their group separately
        group = group or component.get("group") or ""
        component["group"] = group
        component["name"] = name

        status = ReconcileStatus.UNCHANGED
        tags: Set[str] = set()
        if not group:
            try:
                component, tags = self._resolve_identity(component)
                status = ReconcileStatus.RECONCILED
            except ValueError as e:
                logger.debug(f"Could not reconcile package-URL '{component.get('purl')}': {e}")
                status = ReconcileStatus.PASSTHROUGH

        component, src_name, src_version = self._clean_fields(component)
        source_component = self._build_source_component(component, src_name, src_version)

        return ReconcileResult(
            status=status,
            component=component,
            source_component=source_component,
            tags=frozenset(tags),
        )

    def _resolve_identity(self, component: Dict[str, Any]) -> Tuple[Dict[str, Any], Set[str]]:
        """
        Resolve the package-URL of a component without a name-derived group.

        Raises:
            ValueError: If the package-URL cannot be parsed or rebuilt
        """
        raw_purl = component["purl"]
        parsed = PackageURL.from_string(raw_purl)
        name = component["name"]

        purl_type = parsed.type
        namespace = parsed.namespace or None
        group = namespace or ""
        qualifiers: Dict[str, str] = dict(parsed.qualifiers or {})
        codename = self.os_release.codename
        rewrite = False

        if self.os_release.distro:
            qualifiers["distro"] = self.os_release.distro
        if codename:
            qualifiers["distro_name"] = codename

        if purl_type == UNKNOWN_PURL_TYPE:
            purl_type = self.os_release.purl_type
            namespace = None
            group = ""
            rewrite = True

        if self._mageia.matches(raw_purl) and (rewrite or group == self._mageia.namespace):
            namespace = group = self._mageia.namespace
            qualifiers["distro"] = self._mageia.distro
            codename = self._mageia.codename

        tags: Set[str] = {purl_type}

        distro = qualifiers.get("distro")
        if distro:
            tags.add(distro)
            refined = lookup_alias(distro, self.aliases) or self.families.derive_codename(group, distro)
            if refined:
                codename = refined

        if codename:
            tags.add(codename)
            if namespace:
                tags.add(namespace)
            qualifiers["distro_name"] = codename
            rewrite = True

        resolved = dict(component)
        resolved["group"] = group
        if rewrite:
            purl = PackageURL(
                type=purl_type,
                namespace=namespace,
                name=name,
                version=parsed.version,
                qualifiers=qualifiers,
                subpath=parsed.subpath,
            )
            resolved["purl"] = purl.to_string()
            resolved["bom-ref"] = purl_to_bom_ref(purl)

        return resolved, tags

    def _clean_fields(self, component: Dict[str, Any]) -> Tuple[Dict[str, Any], Optional[str], Optional[str]]:
        """Normalize licenses, prune hashes and strip properties."""
        cleaned = dict(component)
        src_name, src_version = extract_source_package(cleaned.pop("properties", None))

        if cleaned.get("licenses"):
            cleaned["licenses"] = normalize_licenses(cleaned["licenses"], self.license_lookup)

        if should_drop_hashes(cleaned.get("hashes")):
            logger.debug(f"Dropping unverifiable hashes for {cleaned.get('name')}")
            del cleaned["hashes"]

        return cleaned, src_name, src_version

    def _build_source_component(
        self,
        component: Dict[str, Any],
        src_name: Optional[str],
        src_version: Optional[str],
    ) -> Optional[Dict[str, Any]]:
        """
        Clone a component as its upstream source package.

        Only built when both source name and version are known and the source
        name differs from the binary package name.
        """
        if not src_name or not src_version or src_name == component.get("name"):
            return None

        try:
            binary_purl = PackageURL.from_string(component["purl"])
            purl = PackageURL(
                type=binary_purl.type,
                namespace=binary_purl.namespace,
                name=src_name,
                version=src_version,
                qualifiers=binary_purl.qualifiers,
                subpath=binary_purl.subpath,
            )
        except ValueError as e:
            logger.debug(f"Skipping source package {src_name} for {component.get('name')}: {e}")
            return None

        source = copy.deepcopy(component)
        source["name"] = src_name
        source["version"] = src_version
        source["purl"] = purl.to_string()
        source["bom-ref"] = purl_to_bom_ref(purl)
        return source
