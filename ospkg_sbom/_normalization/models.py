"""Data models for OS package normalization."""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

# Distro ids whose packages are Debian packages
DEB_DISTRO_IDS = frozenset({"debian", "ubuntu", "pop"})

DEFAULT_PURL_TYPE = "rpm"


@dataclass(frozen=True)
class OsReleaseInfo:
    """
    Parsed ``os-release`` data for the scanned host or image.

    Absent keys read as the empty string.
    """

    values: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, str]]) -> "OsReleaseInfo":
        """Build from a plain key/value mapping, tolerating None."""
        return cls(values=dict(mapping or {}))

    def get(self, key: str) -> str:
        return self.values.get(key) or ""

    @property
    def id(self) -> str:
        return self.get("ID")

    @property
    def id_like(self) -> str:
        return self.get("ID_LIKE")

    @property
    def version_id(self) -> str:
        return self.get("VERSION_ID")

    @property
    def codename(self) -> str:
        return self.get("VERSION_CODENAME")

    @property
    def distro(self) -> str:
        """Distro qualifier value: ``{ID}-{VERSION_ID}``, or just ``ID`` without a version."""
        if self.version_id:
            return f"{self.id}-{self.version_id}"
        return self.id

    @property
    def purl_type(self) -> str:
        """
        Package-URL type implied by the distribution.

        Debian derivatives map to ``deb``; everything else, including Red Hat
        derivatives and unknown distributions, maps to ``rpm``.
        """
        if self.id in DEB_DISTRO_IDS:
            return "deb"
        if "debian" in self.id_like:
            return "deb"
        return DEFAULT_PURL_TYPE

    def is_empty(self) -> bool:
        return not any(self.values.values())


class ReconcileStatus(str, Enum):
    """Which path the identifier reconciler took for a component."""

    RECONCILED = "reconciled"
    UNCHANGED = "unchanged"  # group came from the name, identifiers left as scanned
    PASSTHROUGH = "passthrough"  # package-URL could not be parsed
    SKIPPED = "skipped"  # no package-URL or a language ecosystem package


@dataclass
class ReconcileResult:
    """
    Result of reconciling a single raw scanner component.

    Attributes:
        status: Path taken by the reconciler
        component: Normalized component (None when skipped)
        source_component: Synthetic upstream source package, if one applies
        tags: Type tags observed while reconciling (distro ids, codenames,
            package-URL types, namespaces)
    """

    status: ReconcileStatus
    component: Optional[Dict[str, Any]] = None
    source_component: Optional[Dict[str, Any]] = None
    tags: FrozenSet[str] = frozenset()

    @property
    def skipped(self) -> bool:
        return self.status is ReconcileStatus.SKIPPED

    @classmethod
    def skipped_result(cls) -> "ReconcileResult":
        return cls(status=ReconcileStatus.SKIPPED)


@dataclass
class NormalizationResult:
    """Output of a full normalization run."""

    packages: List[Dict[str, Any]] = field(default_factory=list)
    dependencies: List[Dict[str, Any]] = field(default_factory=list)
    type_tags: set[str] = field(default_factory=set)
    status_counts: Counter = field(default_factory=Counter)
    source_packages: int = 0

    @property
    def all_types(self) -> List[str]:
        # Order is not significant; sorted for reproducible output
        return sorted(self.type_tags)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the ``{osPackages, dependenciesList, allTypes}`` contract."""
        return {
            "osPackages": self.packages,
            "dependenciesList": self.dependencies,
            "allTypes": self.all_types,
        }
