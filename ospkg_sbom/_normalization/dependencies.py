"""Rebuilding the dependency graph against reconciled package-URLs.

Scanner dependency edges point at the pre-reconciliation references, which
still carry the ``none`` type and lack distro qualifiers. Each target is
re-keyed with the owning component's type, namespace and distro qualifiers so
edges line up with the reconciled bom-refs.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from packageurl import PackageURL

from ospkg_sbom.logging_config import logger

from .reconciler import UNKNOWN_PURL_TYPE, purl_to_bom_ref

DISTRO_QUALIFIERS = ("distro", "distro_name")

_UNKNOWN_TYPE_PREFIX = f"pkg:{UNKNOWN_PURL_TYPE}/"


def index_dependencies(raw_dependencies: Optional[Iterable[Mapping[str, Any]]]) -> Dict[str, List[str]]:
    """
    Build a lookup from original component reference to its dependency targets.

    Args:
        raw_dependencies: ``dependencies`` array of the scanner document

    Returns:
        Mapping of ``ref`` to ``dependsOn`` list
    """
    index: Dict[str, List[str]] = {}
    for entry in raw_dependencies or []:
        if not isinstance(entry, Mapping) or not entry.get("ref"):
            continue
        index[entry["ref"]] = list(entry.get("dependsOn") or [])
    return index


def _retarget(target: str, component_purl: PackageURL) -> str:
    if target.startswith(_UNKNOWN_TYPE_PREFIX):
        target = f"pkg:{component_purl.type}/{target[len(_UNKNOWN_TYPE_PREFIX) :]}"
    target_purl = PackageURL.from_string(target)

    qualifiers = dict(target_purl.qualifiers or {})
    component_qualifiers = component_purl.qualifiers or {}
    for key in DISTRO_QUALIFIERS:
        if component_qualifiers.get(key):
            qualifiers[key] = component_qualifiers[key]

    return purl_to_bom_ref(
        PackageURL(
            type=component_purl.type,
            namespace=component_purl.namespace,
            name=target_purl.name,
            version=target_purl.version,
            qualifiers=qualifiers,
            subpath=target_purl.subpath,
        )
    )


def rebuild_dependencies(
    raw_edges: Mapping[str, Sequence[str]],
    original_ref: Optional[str],
    component: Mapping[str, Any],
) -> Optional[Dict[str, Any]]:
    """
    Rebuild the dependency edge of one normalized component.

    Targets that fail to parse are dropped individually; the edge itself is
    still produced. ``dependsOn`` is deduplicated and sorted.

    Args:
        raw_edges: Lookup built by :func:`index_dependencies`
        original_ref: The component's bom-ref as emitted by the scanner
        component: The normalized component

    Returns:
        ``{"ref": ..., "dependsOn": [...]}``, or None when the component has no bom-ref
    """
    ref = component.get("bom-ref")
    if not ref:
        return None

    targets = raw_edges.get(original_ref, []) if original_ref else []
    depends_on: set[str] = set()

    if targets:
        try:
            component_purl = PackageURL.from_string(component.get("purl") or "")
        except ValueError as e:
            logger.debug(f"Dropping {len(targets)} dependencies of {ref}: {e}")
            targets = []

    for target in targets:
        try:
            depends_on.add(_retarget(target, component_purl))
        except (ValueError, TypeError, AttributeError) as e:
            logger.debug(f"Dropping dependency {target} of {ref}: {e}")

    return {"ref": ref, "dependsOn": sorted(depends_on)}
