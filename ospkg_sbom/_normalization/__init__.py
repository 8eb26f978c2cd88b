"""OS package normalization: identifier reconciliation, license clean-up and dependency rebuilding."""

from .dependencies import index_dependencies, rebuild_dependencies
from .distro_aliases import DISTRO_ALIASES, lookup_alias
from .families import FamilyRegistry, create_default_family_registry
from .licenses import find_license_id, normalize_licenses, should_drop_hashes
from .models import NormalizationResult, OsReleaseInfo, ReconcileResult, ReconcileStatus
from .os_release import parse_os_release, read_os_release
from .pipeline import NormalizationPipeline, normalize_all, normalize_bom
from .reconciler import IdentifierReconciler

__all__ = [
    "DISTRO_ALIASES",
    "FamilyRegistry",
    "IdentifierReconciler",
    "NormalizationPipeline",
    "NormalizationResult",
    "OsReleaseInfo",
    "ReconcileResult",
    "ReconcileStatus",
    "create_default_family_registry",
    "find_license_id",
    "index_dependencies",
    "lookup_alias",
    "normalize_all",
    "normalize_bom",
    "normalize_licenses",
    "parse_os_release",
    "read_os_release",
    "rebuild_dependencies",
    "should_drop_hashes",
]
