"""Attachment download and rasterization service."""

import logging
import re
import tempfile
from concurrent.futures import Executor
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

import pypdfium2 as pdfium
from PIL import Image, UnidentifiedImageError

from firereport.api.client import FireflyClient
from firereport.domain.cancellation import CancellationToken
from firereport.domain.entities import Attachment, AttachmentImage, TransactionJournal
from firereport.domain.errors import ReportCancelledError
from firereport.domain.progress import ProgressTracker

logger = logging.getLogger(__name__)

RASTER_DPI = 300
PDF_MIME = "application/pdf"
DEFAULT_CACHE_DIR = Path(tempfile.gettempdir()) / "firereport-attachments"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def cache_filename(attachment: Attachment) -> str:
    """Filesystem-safe cache name derived from attachment id and filename."""
    safe_name = _UNSAFE_CHARS.sub("_", Path(attachment.filename).name).strip("._")
    return f"{attachment.id}-{safe_name or 'attachment'}"


def rasterize_pdf(pdf_path: Path, dpi: int = RASTER_DPI) -> list[Path]:
    """Render every page of a PDF to PNG files beside it.

    Page files are named '{stem}-{page}.png'; pages already on disk are
    reused instead of re-rendered.
    """
    pdf_path = Path(pdf_path)
    document = pdfium.PdfDocument(str(pdf_path))
    try:
        pages: list[Path] = []
        for index in range(len(document)):
            out_file = pdf_path.with_name(f"{pdf_path.stem}-{index + 1}.png")
            if not out_file.exists():
                page = document[index]
                try:
                    bitmap = page.render(scale=dpi / 72)
                    bitmap.to_pil().convert("RGB").save(out_file, dpi=(dpi, dpi))
                finally:
                    page.close()
            pages.append(out_file)
        return pages
    finally:
        document.close()


def verify_image(image_path: Path) -> None:
    """Raise if the file cannot be decoded as an image."""
    with Image.open(image_path) as image:
        try:
            image.verify()
        except SyntaxError as e:
            raise UnidentifiedImageError(f"Corrupt image {image_path}: {e}") from e


class AttachmentService:
    """Download attachment binaries and turn them into report pages."""

    def __init__(
        self,
        client: FireflyClient,
        cache_dir: Optional[Path] = None,
        progress: Optional[ProgressTracker] = None,
        cancel_token: Optional[CancellationToken] = None,
        raster_executor: Optional[Executor] = None,
        dpi: int = RASTER_DPI,
    ):
        """Initialize attachment service.

        Args:
            client: Firefly III client used for downloads
            cache_dir: Directory for downloaded and rasterized files
            progress: Optional progress tracker for status messages
            cancel_token: Optional token checked before each attachment
            raster_executor: Optional executor for CPU-bound PDF rendering
            dpi: Rasterization resolution
        """
        self.client = client
        self.cache_dir = Path(cache_dir) if cache_dir is not None else DEFAULT_CACHE_DIR
        self.progress = progress
        self.cancel_token = cancel_token
        self.raster_executor = raster_executor
        self.dpi = dpi

    def download_file(self, attachment: Attachment) -> Path:
        """Download an attachment into the cache unless already present."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        target = self.cache_dir / cache_filename(attachment)
        if target.exists():
            logger.debug("Using cached attachment %s", target)
            return target

        content = self.client.download(attachment.download_url)
        partial = target.with_name(target.name + ".part")
        partial.write_bytes(content)
        partial.replace(target)
        return target

    def render_pages(self, attachment: Attachment, file: Path) -> tuple[AttachmentImage, ...]:
        """Turn a downloaded file into image pages according to its mime type."""
        if attachment.mime.startswith("image/"):
            verify_image(file)
            return (AttachmentImage(path=file, page=1),)

        if attachment.mime == PDF_MIME:
            if self.raster_executor is not None:
                pages = self.raster_executor.submit(rasterize_pdf, file, self.dpi).result()
            else:
                pages = rasterize_pdf(file, self.dpi)
            return tuple(
                AttachmentImage(path=path, page=number)
                for number, path in enumerate(pages, start=1)
            )

        return ()

    def download_attachment(self, attachment: Attachment) -> Attachment:
        file = self.download_file(attachment)
        return replace(attachment, file=file, image_files=self.render_pages(attachment, file))

    def download_attachments(
        self, transaction_journals: Sequence[TransactionJournal]
    ) -> list[Attachment]:
        """Download every attachment of the given journals.

        Any failure on a single attachment (timeout, HTTP error, oversized or
        undecodable file) is logged and skipped; cancellation is always
        propagated.

        Returns:
            Downloaded attachments with file and image pages filled in
        """
        downloaded: list[Attachment] = []
        total = len(transaction_journals)

        for index, journal in enumerate(transaction_journals, start=1):
            for attachment in journal.attachments:
                if self.cancel_token is not None:
                    self.cancel_token.raise_if_cancelled()
                if self.progress is not None:
                    self.progress.send_message(
                        f"Downloading attachments ({index}/{total}): {attachment.filename}"
                    )

                try:
                    downloaded.append(self.download_attachment(attachment))
                except ReportCancelledError:
                    raise
                except Exception as e:
                    logger.error(
                        "Skipping attachment %s (%s): %s: %s",
                        attachment.id,
                        attachment.filename,
                        type(e).__name__,
                        e,
                    )

        logger.info("%d attachments downloaded successfully.", len(downloaded))
        return downloaded
