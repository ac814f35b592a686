# guestsign/coords.py
# canvas en pixels (origine en haut a gauche, echelle d affichage) <-> espace pdf
# (origine en bas a gauche, points a l echelle 1.0)
import math
from dataclasses import dataclass

from .errors import InvalidViewportError

# ecart de proportions tolere entre canvas et page (arrondi des pixels)
ASPECT_TOLERANCE = 0.01


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def to_dict(self):
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class Viewport:
    # page rendue: taille du canvas affiche et taille native de la page
    canvas_width: float
    canvas_height: float
    page_width: float
    page_height: float

    @property
    def scale_factor(self) -> float:
        check_viewport(self)
        return self.page_width / self.canvas_width


def _positive(value) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def check_viewport(viewport: Viewport) -> None:
    dims = (viewport.canvas_width, viewport.canvas_height, viewport.page_width, viewport.page_height)
    if not all(_positive(d) for d in dims):
        raise InvalidViewportError(f"Viewport dimensions must be positive, got {dims}")
    canvas_ratio = viewport.canvas_height / viewport.canvas_width
    page_ratio = viewport.page_height / viewport.page_width
    if abs(canvas_ratio - page_ratio) > ASPECT_TOLERANCE * page_ratio:
        raise InvalidViewportError("Canvas is not uniformly scaled from the page")


def canvas_to_pdf_point(cx: float, cy: float, viewport: Viewport) -> tuple[float, float]:
    scale = viewport.scale_factor
    return cx * scale, (viewport.canvas_height - cy) * scale


def pdf_to_canvas_point(x: float, y: float, viewport: Viewport) -> tuple[float, float]:
    scale = viewport.scale_factor
    return x / scale, viewport.canvas_height - y / scale


def canvas_to_pdf_rect(cx: float, cy: float, cw: float, ch: float, viewport: Viewport) -> Rect:
    # cadre canvas donne par son coin haut-gauche -> rect pdf ancre en bas a gauche
    scale = viewport.scale_factor
    # la hauteur est retiree avant l inversion de l axe y
    return Rect(
        x=cx * scale,
        y=(viewport.canvas_height - cy - ch) * scale,
        width=cw * scale,
        height=ch * scale,
    )


def pdf_to_canvas_rect(rect: Rect, viewport: Viewport) -> tuple[float, float, float, float]:
    # inverse de canvas_to_pdf_rect: (cx, cy, cw, ch) avec le coin haut-gauche
    scale = viewport.scale_factor
    cw = rect.width / scale
    ch = rect.height / scale
    return rect.x / scale, viewport.canvas_height - rect.y / scale - ch, cw, ch
