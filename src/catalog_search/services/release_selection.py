"""Default choice of which release a package detail page presents.

The catalog service treats selection as an injected function; this is the
one it uses unless told otherwise.
"""

import logging
import re
from typing import Callable, List, Optional, Tuple

from ..domain.package_info import Package
from ..domain.release_info import Release, ReleaseOptions, ReleaseSelection

logger = logging.getLogger(__name__)

ReleaseSelector = Callable[[Package, ReleaseSelection, List[Release]], Optional[ReleaseOptions]]


def version_key(version: str) -> Tuple:
    """Sort key that orders numeric version segments numerically.

    Examples:
        >>> version_key("1.10.0") > version_key("1.9.2")
        True
    """
    return tuple((0, int(part), "") if part.isdigit() else (1, 0, part) for part in re.split(r"[.\-+]", version))


def _matches(release: Release, selection: ReleaseSelection) -> bool:
    if selection.target and release.target != selection.target:
        return False
    if selection.artifact and release.maven.artifact_id != selection.artifact:
        return False
    if selection.version and release.maven.version != selection.version:
        return False
    return True


def default_release(
    package: Package,
    selection: ReleaseSelection,
    releases: List[Release],
) -> Optional[ReleaseOptions]:
    """Pick the newest release that satisfies the selection.

    Args:
        package: Package the releases belong to
        selection: Optional target/artifact/version constraints
        releases: Full release history of the package

    Returns:
        ReleaseOptions for the chosen release, or None when nothing qualifies
    """
    candidates = [release for release in releases if _matches(release, selection)]
    if not candidates:
        logger.debug(f"No release of {package.reference} matches {selection}")
        return None

    chosen = max(candidates, key=lambda r: (r.released or "", version_key(r.maven.version)))

    return ReleaseOptions(
        release=chosen,
        artifacts=sorted({r.maven.artifact_id for r in releases}),
        versions=sorted({r.maven.version for r in releases}, key=version_key, reverse=True),
        targets=sorted({r.target for r in releases if r.target}),
    )
