"""
Plotting for Voronoi Diagrams

Draws a built diagram with matplotlib: region polygons, edges, vertices
and seeds. matplotlib is an optional dependency (the ``viz`` extra).
"""

from typing import Optional
import numpy as np
import structlog

from .geometry.diagram import VoronoiDiagram2D

logger = structlog.get_logger()


def plot_diagram(
    diagram: VoronoiDiagram2D,
    save_path: Optional[str] = None,
    show_vertices: bool = False,
    fill_regions: bool = True
) -> None:
    """
    Plot a diagram that has been built.

    Creates a plot showing:
    - Region polygons, colored by seed id (if fill_regions)
    - Voronoi edges (black)
    - Vertices (small gray dots, if show_vertices)
    - Seeds (red dots)
    - The bounding window (dashed)

    Args:
        diagram: Diagram in the BUILT or QUERYABLE state
        save_path: Optional path to save the figure; shown on screen otherwise
        show_vertices: Draw every vertex
        fill_regions: Fill region polygons
    """
    try:
        import matplotlib.pyplot as plt
        from matplotlib.collections import LineCollection, PolyCollection
    except ImportError:
        logger.warning("matplotlib not available for visualization")
        return

    fig, ax = plt.subplots(figsize=(8, 8))

    if fill_regions:
        polygons = [diagram.region_polygon(i) for i in range(diagram.number_of_seeds)]
        polygons = [p for p in polygons if len(p) >= 3]
        colors = plt.cm.tab20(np.arange(len(polygons)) % 20)
        ax.add_collection(PolyCollection(polygons, facecolors=colors, alpha=0.35,
                                         edgecolors='none'))

    segments = [
        [diagram.get_vertex(edge.left_id), diagram.get_vertex(edge.right_id)]
        for edge in diagram.edges()
    ]
    ax.add_collection(LineCollection(segments, colors='black', linewidths=1))

    if show_vertices and diagram.vertex_list_size() > 0:
        points = np.array([p for _, p in diagram.vertices()])
        ax.scatter(points[:, 0], points[:, 1], c='gray', s=8, zorder=3)

    seeds = diagram.seeds_array()
    ax.scatter(seeds[:, 0], seeds[:, 1], c='red', s=20, zorder=4, label='Seeds')

    window = diagram.window
    corners = np.vstack([window.corners(), window.corners()[:1]])
    ax.plot(corners[:, 0], corners[:, 1], 'k--', linewidth=0.8)

    ax.set_xlim(window.x_min, window.x_max)
    ax.set_ylim(window.y_min, window.y_max)
    ax.set_title(f'Voronoi Diagram ({diagram.number_of_seeds} seeds)')
    ax.set_aspect('equal')
    ax.legend(loc='upper right')

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info("Diagram plot saved", path=save_path)
    else:
        plt.show()

    plt.close(fig)
