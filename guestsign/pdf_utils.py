# guestsign/pdf_utils.py
import io
import logging

from PIL import Image, UnidentifiedImageError
from PyPDF2 import PdfReader, PdfWriter
from PyPDF2.errors import PdfReadError
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .coords import Rect
from .errors import InvalidDocumentError, InvalidImageError, PageNotFoundError

logger = logging.getLogger(__name__)

OUTLINE_COLOR = (1, 0, 0)
OUTLINE_WIDTH = 3


def open_pdf(pdf_bytes: bytes) -> PdfReader:
    # lecture du pdf source, sans jamais modifier les octets d origine
    try:
        reader = PdfReader(io.BytesIO(pdf_bytes))
        if reader.is_encrypted:
            raise InvalidDocumentError("Encrypted PDFs are not supported")
        # force le parsing de l arbre des pages
        len(reader.pages)
    except (PdfReadError, ValueError, KeyError) as e:
        raise InvalidDocumentError(f"Document is not a readable PDF: {e}") from e
    return reader


def page_count(pdf_bytes: bytes) -> int:
    return len(open_pdf(pdf_bytes).pages)


def check_page(reader: PdfReader, page_index: int):
    count = len(reader.pages)
    if not 0 <= page_index < count:
        raise PageNotFoundError(page_index, count)
    return reader.pages[page_index]


def page_size(pdf_bytes: bytes, page_index: int) -> tuple[float, float]:
    # taille native de la page (points, echelle 1.0)
    page = check_page(open_pdf(pdf_bytes), page_index)
    return float(page.mediabox.width), float(page.mediabox.height)


def load_signature_image(image_bytes: bytes) -> Image.Image:
    try:
        img = Image.open(io.BytesIO(image_bytes))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise InvalidImageError(f"Signature image could not be decoded: {e}") from e
    # canal alpha pour que seuls les traits soient visibles
    return img.convert("RGBA")


def create_overlay(page_w: float, page_h: float, draw):
    # creation d une page overlay de la taille de la page cible
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=(page_w, page_h))
    draw(c)
    c.save()
    buffer.seek(0)
    return PdfReader(buffer).pages[0]


def merge_overlay(reader: PdfReader, overlay_page, page_num: int) -> bytes:
    # fusion de l overlay sur une seule page, les autres sont recopiees telles quelles
    writer = PdfWriter()
    for i, page in enumerate(reader.pages):
        if i == page_num:
            page.merge_page(overlay_page)
        writer.add_page(page)
    out = io.BytesIO()
    writer.write(out)
    return out.getvalue()


def _stamp(source_bytes: bytes, page_index: int, draw) -> bytes:
    reader = open_pdf(source_bytes)
    page = check_page(reader, page_index)
    # l overlay couvre l espace utilisateur de la page jusqu au coin haut-droit
    overlay = create_overlay(float(page.mediabox.right), float(page.mediabox.top), draw)
    return merge_overlay(reader, overlay, page_index)


def stamp_signature(source_bytes: bytes, page_index: int, rect: Rect, image_bytes: bytes) -> bytes:
    # copie du pdf avec l image posee sur rect (espace pdf, origine en bas a gauche)
    image = load_signature_image(image_bytes)

    def draw(c):
        c.drawImage(ImageReader(image), rect.x, rect.y, width=rect.width, height=rect.height, mask="auto")

    stamped = _stamp(source_bytes, page_index, draw)
    logger.debug(f"Signature stamped on page {page_index} at {rect}")
    return stamped


def stamp_outline(source_bytes: bytes, page_index: int, rect: Rect) -> bytes:
    # variante calibration: un cadre rouge a la place de l image

    def draw(c):
        c.setStrokeColorRGB(*OUTLINE_COLOR)
        c.setLineWidth(OUTLINE_WIDTH)
        c.rect(rect.x, rect.y, rect.width, rect.height, stroke=1, fill=0)

    return _stamp(source_bytes, page_index, draw)
