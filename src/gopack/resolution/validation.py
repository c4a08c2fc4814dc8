"""
Cross-check declared dependencies against the imports the source tree uses.
"""

from typing import Dict, List

from gopack.resolution.model import Dep, Dependencies
from gopack.schemas import ProjectError, ProjectErrorKind, ProjectStats


def unmanaged_import_error(stats) -> ProjectError:
    return ProjectError(
        kind=ProjectErrorKind.UNMANAGED_IMPORT,
        import_path=stats.path,
        locations=list(stats.locations),
    )


def unused_dependency_error(import_path: str) -> ProjectError:
    return ProjectError(kind=ProjectErrorKind.UNUSED_DEPENDENCY, import_path=import_path)


def validate(dependencies: Dependencies, project: ProjectStats) -> List[ProjectError]:
    """
    Collect every problem in one pass.

    Each remote import not covered by the graph is an unmanaged import; each
    declared dependency nothing imports is unused.
    """
    errors: List[ProjectError] = []
    included: Dict[str, Dep] = {}

    for path in sorted(project.imports_by_path):
        stats = project.imports_by_path[path]
        if not stats.remote:
            continue
        node = dependencies.includes_dependency(path)
        if node is not None:
            included[node.dependency.import_path] = node.dependency
        else:
            errors.append(unmanaged_import_error(stats))

    for dep in dependencies:
        if dep.import_path not in included and not project.is_import_used(dep.import_path):
            errors.append(unused_dependency_error(dep.import_path))

    return errors
