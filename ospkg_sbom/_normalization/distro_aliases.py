"""Release codenames keyed by ``{distro-id}-{version}``.

Keep this table updated when new Ubuntu and Debian releases ship.
"""

from types import MappingProxyType
from typing import Mapping, Optional

DISTRO_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        # Ubuntu
        "ubuntu-4.10": "warty",
        "ubuntu-5.04": "hoary",
        "ubuntu-5.10": "breezy",
        "ubuntu-6.06": "dapper",
        "ubuntu-6.10": "edgy",
        "ubuntu-7.04": "feisty",
        "ubuntu-7.10": "gutsy",
        "ubuntu-8.04": "hardy",
        "ubuntu-8.10": "intrepid",
        "ubuntu-9.04": "jaunty",
        "ubuntu-9.10": "karmic",
        "ubuntu-10.04": "lucid",
        "ubuntu-10.10": "maverick",
        "ubuntu-11.04": "natty",
        "ubuntu-11.10": "oneiric",
        "ubuntu-12.04": "precise",
        "ubuntu-12.10": "quantal",
        "ubuntu-13.04": "raring",
        "ubuntu-13.10": "saucy",
        "ubuntu-14.04": "trusty",
        "ubuntu-14.10": "utopic",
        "ubuntu-15.04": "vivid",
        "ubuntu-15.10": "wily",
        "ubuntu-16.04": "xenial",
        "ubuntu-16.10": "yakkety",
        "ubuntu-17.04": "zesty",
        "ubuntu-17.10": "artful",
        "ubuntu-18.04": "bionic",
        "ubuntu-18.10": "cosmic",
        "ubuntu-19.04": "disco",
        "ubuntu-19.10": "eoan",
        "ubuntu-20.04": "focal",
        "ubuntu-20.10": "groovy",
        "ubuntu-21.04": "hirsute",
        "ubuntu-21.10": "impish",
        "ubuntu-22.04": "jammy",
        "ubuntu-22.10": "kinetic",
        "ubuntu-23.04": "lunar",
        "ubuntu-23.10": "mantic",
        "ubuntu-24.04": "noble",
        "ubuntu-24.10": "oracular",
        "ubuntu-25.04": "plucky",
        # Debian (point releases share the major release codename)
        "debian-14": "forky",
        "debian-14.5": "forky",
        "debian-13": "trixie",
        "debian-13.5": "trixie",
        "debian-12": "bookworm",
        "debian-12.5": "bookworm",
        "debian-11": "bullseye",
        "debian-11.5": "bullseye",
        "debian-10": "buster",
        "debian-10.5": "buster",
        "debian-9": "stretch",
        "debian-9.5": "stretch",
        "debian-8": "jessie",
        "debian-8.5": "jessie",
        "debian-7": "wheezy",
        "debian-7.5": "wheezy",
        "debian-6": "squeeze",
        "debian-5": "lenny",
        "debian-4": "etch",
        "debian-3.1": "sarge",
        "debian-3": "woody",
        "debian-2.2": "potato",
        "debian-2.1": "slink",
        "debian-2": "hamm",
        "debian-1.3": "bo",
        "debian-1.2": "rex",
        "debian-1.1": "buzz",
    }
)


def lookup_alias(distro_key: str, aliases: Mapping[str, str] = DISTRO_ALIASES) -> Optional[str]:
    """
    Look up the release codename for a ``{id}-{version}`` key.

    Args:
        distro_key: Distro key such as ``"ubuntu-20.04"``
        aliases: Alias table to consult

    Returns:
        Codename (e.g. ``"focal"``) or None if the key is unknown
    """
    if not distro_key:
        return None
    return aliases.get(distro_key)
