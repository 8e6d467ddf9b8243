"""Post-generation mesh validation."""

import numpy as np
import structlog

from .mesh import MeshBuffers

logger = structlog.get_logger()


class ValidationResult:
    """Result of mesh validation."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.passed = True

    def add_error(self, message: str) -> None:
        """Add validation error."""
        self.errors.append(message)
        self.passed = False

    def add_warning(self, message: str) -> None:
        """Add validation warning."""
        self.warnings.append(message)


def validate_mesh(mesh: MeshBuffers) -> ValidationResult:
    """Validate generated mesh buffers against their structural invariants.

    Args:
        mesh: Mesh buffers to check.

    Returns:
        ValidationResult with any errors/warnings.
    """
    result = ValidationResult()

    _check_buffer_alignment(mesh, result)
    _check_triangle_indices(mesh, result)
    _check_triangle_count(mesh, result)
    _check_finite(mesh, result)
    _check_uv_range(mesh, result)

    if result.passed:
        logger.info("mesh_validation_passed", warnings=len(result.warnings))
    else:
        logger.warning("mesh_validation_failed", errors=len(result.errors))
        for error in result.errors:
            logger.error("mesh_validation_error", detail=error)

    for warning in result.warnings:
        logger.warning("mesh_validation_warning", detail=warning)

    return result


def _check_buffer_alignment(mesh: MeshBuffers, result: ValidationResult) -> None:
    """Check that per-vertex buffers have matching lengths."""
    n = len(mesh.vertices)
    if len(mesh.uvs) != n:
        result.add_error(f"UV count {len(mesh.uvs)} != vertex count {n}")
    if len(mesh.normals) != n:
        result.add_error(f"Normal count {len(mesh.normals)} != vertex count {n}")
    if mesh.vertex_count > n:
        result.add_error(
            f"Populated vertex count {mesh.vertex_count} exceeds buffer size {n}"
        )


def _check_triangle_indices(mesh: MeshBuffers, result: ValidationResult) -> None:
    """Check that triangles reference valid, distinct vertices."""
    if len(mesh.triangles) % 3 != 0:
        result.add_error(f"Triangle index count {len(mesh.triangles)} is not a multiple of 3")
        return
    if len(mesh.triangles) == 0:
        result.add_warning("Mesh has no triangles")
        return

    triples = mesh.triangle_triples()
    out_of_range = int(np.sum(triples >= mesh.vertex_count))
    if out_of_range > 0:
        result.add_error(f"{out_of_range} triangle indices reference unpopulated vertices")

    degenerate = int(np.sum(
        (triples[:, 0] == triples[:, 1])
        | (triples[:, 1] == triples[:, 2])
        | (triples[:, 0] == triples[:, 2])
    ))
    if degenerate > 0:
        result.add_error(f"{degenerate} triangles repeat a vertex index")


def _check_triangle_count(mesh: MeshBuffers, result: ValidationResult) -> None:
    """Check the triangle count matches the vertex grid."""
    expected = (mesh.vertices_per_line - 1) ** 2 * 6
    if len(mesh.triangles) != expected:
        result.add_warning(
            f"Triangle index count {len(mesh.triangles)} differs from grid expectation {expected}"
        )


def _check_finite(mesh: MeshBuffers, result: ValidationResult) -> None:
    """Check positions and normals contain no NaN or infinity."""
    if not np.all(np.isfinite(mesh.vertices)):
        result.add_error("Vertices contain non-finite values")
    if not np.all(np.isfinite(mesh.normals)):
        result.add_error("Normals contain non-finite values")


def _check_uv_range(mesh: MeshBuffers, result: ValidationResult) -> None:
    """Check populated UVs lie in [0, 1]."""
    uvs = mesh.populated_uvs()
    if uvs.size and (uvs.min() < 0.0 or uvs.max() > 1.0):
        result.add_warning(
            f"UVs outside [0, 1]: min {uvs.min():.3f}, max {uvs.max():.3f}"
        )
