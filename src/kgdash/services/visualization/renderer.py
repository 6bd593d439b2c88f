"""
Matplotlib rendering of layout frames.

The renderer is the render-loop collaborator of the layout engine: it reads the
current positions and draws edges, category-coloured nodes, highlight rings and
short labels onto the engine's logical canvas.
"""

import base64
import io
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches

from ...shared import get_logger
from ..layout.engine import ForceLayoutEngine
from ..layout.models import PositionedNode, Edge, LayoutParameters, category_color

MAX_LABEL_LENGTH = 8


def short_label(label: str, max_length: int = MAX_LABEL_LENGTH) -> str:
    """Truncate a label the way node captions are drawn."""
    return label[:max_length] + "…" if len(label) > max_length else label


class FrameRenderer:
    """
    Draw one frame of a layout.

    Args:
        dpi: Output resolution
        show_legend: Whether to add a category legend
    """

    BACKGROUND = '#0f172a'
    EDGE_COLOR = '#64748b'
    HIGHLIGHT_COLOR = '#facc15'
    SELECTED_COLOR = '#ffffff'

    def __init__(self, dpi: int = 100, show_legend: bool = True):
        self.logger = get_logger(__name__)
        self.dpi = dpi
        self.show_legend = show_legend

    def render_engine(self,
                      engine: ForceLayoutEngine,
                      output_path: Optional[Union[str, Path]] = None,
                      highlighted: Iterable[str] = ()) -> str:
        """Render the engine's current working set."""
        nodes, edges = engine.snapshot()
        return self.render(nodes, edges, engine.params, output_path,
                           highlighted=highlighted, selected_id=engine.selected_id)

    def render(self,
               nodes: Sequence[PositionedNode],
               edges: Sequence[Edge],
               params: LayoutParameters,
               output_path: Optional[Union[str, Path]] = None,
               highlighted: Iterable[str] = (),
               selected_id: Optional[str] = None) -> str:
        """
        Render a frame.

        Args:
            nodes: Positioned nodes
            edges: Edges; those with a missing endpoint are skipped
            params: Canvas size
            output_path: PNG path; when omitted a base64 data URI is returned
            highlighted: Node ids drawn with a highlight ring
            selected_id: Node drawn with a selection outline

        Returns:
            Written path or ``data:image/png;base64,...``
        """
        highlighted = set(highlighted)
        by_id = {node.id: node for node in nodes}

        fig, ax = plt.subplots(figsize=(params.width / self.dpi, params.height / self.dpi), dpi=self.dpi)
        try:
            ax.set_xlim(0, params.width)
            ax.set_ylim(params.height, 0)  # canvas y grows downwards
            ax.set_aspect('equal')
            ax.axis('off')
            fig.patch.set_facecolor(self.BACKGROUND)

            drawn_edges = 0
            for edge in edges:
                source = by_id.get(edge.source_id)
                target = by_id.get(edge.target_id)
                if source is None or target is None:
                    continue
                ax.plot([source.x, target.x], [source.y, target.y],
                        color=self.EDGE_COLOR, linewidth=1.5, alpha=0.6, zorder=1)
                drawn_edges += 1

            for node in nodes:
                if node.id in highlighted:
                    ax.add_patch(mpatches.Circle((node.x, node.y), node.radius + 5,
                                                 color=self.HIGHLIGHT_COLOR, alpha=0.4, zorder=2))
                ax.add_patch(mpatches.Circle(
                    (node.x, node.y), node.radius,
                    facecolor=category_color(node.category),
                    edgecolor=self.SELECTED_COLOR if node.id == selected_id else 'none',
                    linewidth=2, zorder=3
                ))
                ax.text(node.x, node.y, short_label(node.label), color='white',
                        fontsize=7, ha='center', va='center', zorder=4)

            if self.show_legend and nodes:
                categories = sorted({node.category for node in nodes})
                handles = [mpatches.Patch(color=category_color(c), label=c) for c in categories]
                ax.legend(handles=handles, loc='upper right', fontsize=7)

            self.logger.debug(f"Rendered frame with {len(nodes)} nodes and {drawn_edges} edges")

            if output_path is not None:
                output_path = Path(output_path)
                output_path.parent.mkdir(parents=True, exist_ok=True)
                fig.savefig(output_path, format='png', facecolor=fig.get_facecolor())
                return str(output_path)

            buffer = io.BytesIO()
            fig.savefig(buffer, format='png', facecolor=fig.get_facecolor())
            encoded = base64.b64encode(buffer.getvalue()).decode('utf-8')
            return f"data:image/png;base64,{encoded}"
        finally:
            plt.close(fig)
