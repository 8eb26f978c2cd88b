"""Per-distribution-family codename rules.

Some distributions do not publish codenames through ``os-release``, and the
scanner encodes their release in the ``distro`` qualifier instead. Each family
gets a small rule object that turns that qualifier into a codename. Rules are
looked up by the package group (the package-URL namespace).
"""

from typing import Dict, Optional, Protocol

from ospkg_sbom.logging_config import logger


class CodenameRule(Protocol):
    """Interface for a distro-family codename rule."""

    @property
    def family(self) -> str:
        """Package group this rule applies to (e.g. ``"alpine"``)."""
        ...

    def derive(self, distro: str) -> Optional[str]:
        """
        Derive a codename from a ``distro`` qualifier value.

        Args:
            distro: Qualifier value such as ``"alpine-3.18.4"`` or ``"redhat-8.6"``

        Returns:
            Codename, or None when the value does not have the expected shape
        """
        ...


class AlpineRule:
    """``alpine-3.18.4`` (or ``3.18.4``) becomes ``alpine-3.18``."""

    @property
    def family(self) -> str:
        return "alpine"

    def derive(self, distro: str) -> Optional[str]:
        version = distro.removeprefix(f"{self.family}-")
        tokens = version.split(".")
        if len(tokens) < 2:
            return None
        return f"{self.family}-{tokens[0]}.{tokens[1]}"


class PhotonRule:
    """``photon-4.0`` becomes ``photon``."""

    @property
    def family(self) -> str:
        return "photon"

    def derive(self, distro: str) -> Optional[str]:
        tokens = distro.split("-")
        if len(tokens) < 2:
            return None
        return tokens[0]


class RedHatRule:
    """``redhat-8.6`` becomes ``enterprise_linux-8``."""

    @property
    def family(self) -> str:
        return "redhat"

    def derive(self, distro: str) -> Optional[str]:
        tokens = distro.split(".")
        if len(tokens) < 2:
            return None
        return tokens[0].replace("redhat", "enterprise_linux")


class MageiaOverride:
    """
    Mageia packages are reported with a ``none`` package-URL type.

    They are recognised by the ``.mga`` release token in the package-URL
    (e.g. ``pkg:none/bash@5.1.8-3.mga8``) and get a fixed namespace, distro
    qualifier and codename. This is an identity override, not a codename
    rule: packages in the ``mageia`` namespace without the token are left to
    the regular lookups.
    """

    token = ".mga"
    namespace = "mageia"
    distro = "mageia"
    codename = "mga"

    def matches(self, purl: str) -> bool:
        return self.token in purl


class FamilyRegistry:
    """
    Registry of codename rules keyed by distro family.

    Example:
        registry = FamilyRegistry()
        registry.register(AlpineRule())
        registry.derive_codename("alpine", "alpine-3.18.4")  # "alpine-3.18"
    """

    def __init__(self) -> None:
        self._rules: Dict[str, CodenameRule] = {}

    def register(self, rule: CodenameRule) -> None:
        self._rules[rule.family] = rule
        logger.debug(f"Registered codename rule for family: {rule.family}")

    def derive_codename(self, family: str, distro: str) -> Optional[str]:
        """
        Derive a codename using the rule registered for ``family``.

        Args:
            family: Package group / distro family
            distro: ``distro`` qualifier value

        Returns:
            Codename, or None if no rule applies
        """
        if not family or not distro:
            return None
        rule = self._rules.get(family)
        if rule is None:
            return None
        return rule.derive(distro)


def create_default_family_registry() -> FamilyRegistry:
    """Create a registry with the built-in alpine, photon and redhat rules."""
    registry = FamilyRegistry()
    registry.register(AlpineRule())
    registry.register(PhotonRule())
    registry.register(RedHatRule())
    return registry
