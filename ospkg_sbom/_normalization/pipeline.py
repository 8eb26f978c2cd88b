"""Normalization pipeline over a full scanner document."""

from typing import Any, Iterable, Mapping, Optional

from ospkg_sbom.logging_config import logger

from .dependencies import index_dependencies, rebuild_dependencies
from .models import NormalizationResult, OsReleaseInfo
from .reconciler import IdentifierReconciler


class NormalizationPipeline:
    """
    Drive reconciliation and dependency rebuilding over all scanner components.

    Components are processed in input order. Each normalized component is
    followed by its source package (if any) in the output, and its dependency
    edge is looked up by the component's original bom-ref.
    """

    def __init__(self, reconciler: IdentifierReconciler) -> None:
        self.reconciler = reconciler

    @classmethod
    def for_os_release(cls, os_release: Optional[OsReleaseInfo]) -> "NormalizationPipeline":
        return cls(IdentifierReconciler(os_release))

    def run(
        self,
        raw_components: Optional[Iterable[Mapping[str, Any]]],
        raw_dependencies: Optional[Iterable[Mapping[str, Any]]] = None,
    ) -> NormalizationResult:
        """
        Normalize all components and rebuild their dependency edges.

        Args:
            raw_components: ``components`` array of the scanner document
            raw_dependencies: ``dependencies`` array of the scanner document

        Returns:
            NormalizationResult with packages, dependencies and type tags
        """
        result = NormalizationResult()
        raw_edges = index_dependencies(raw_dependencies)

        for raw in raw_components or []:
            if not isinstance(raw, Mapping):
                continue

            reconciled = self.reconciler.reconcile(raw)
            result.status_counts[reconciled.status.value] += 1
            if reconciled.skipped or reconciled.component is None:
                continue

            result.packages.append(reconciled.component)
            result.type_tags.update(reconciled.tags)

            edge = rebuild_dependencies(raw_edges, raw.get("bom-ref"), reconciled.component)
            if edge:
                result.dependencies.append(edge)

            if reconciled.source_component:
                result.packages.append(reconciled.source_component)
                result.source_packages += 1

        logger.info(
            f"Normalized {len(result.packages)} OS packages "
            f"({result.source_packages} source packages, {len(result.dependencies)} dependency entries, "
            f"{result.status_counts['skipped']} skipped)"
        )
        return result


def normalize_all(
    raw_components: Optional[Iterable[Mapping[str, Any]]],
    raw_dependencies: Optional[Iterable[Mapping[str, Any]]],
    os_release: Optional[OsReleaseInfo],
) -> NormalizationResult:
    """Normalize scanner components and dependencies for the given os-release metadata."""
    return NormalizationPipeline.for_os_release(os_release).run(raw_components, raw_dependencies)


def normalize_bom(bom: Optional[Mapping[str, Any]], os_release: Optional[OsReleaseInfo]) -> NormalizationResult:
    """
    Normalize a scanner CycloneDX document.

    A missing document or one without components yields an empty result.
    """
    if not bom:
        logger.debug("No scanner document to normalize")
        return NormalizationResult()
    if os_release is None or os_release.is_empty():
        logger.debug("No os-release metadata; package-URLs keep the scanner's distro qualifiers")
    return normalize_all(bom.get("components"), bom.get("dependencies"), os_release)
