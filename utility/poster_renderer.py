"""
Poster and animated GIF rendering with Pillow.

Composition for every frame:
    black canvas → background scaled into 60% of the canvas, centered
    → near-opaque dark overlay → centered white text.
"""
from __future__ import annotations

import asyncio
import logging
import uuid
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError, features

from utility.errors import RenderError
from utility.storage import ArtifactStore, artifact_key, content_type_for, staged_file

logger = logging.getLogger(__name__)

CANVAS_SIZE = (800, 800)
BACKGROUND_SCALE = 0.6
OVERLAY_COLOR = (0, 0, 0, 230)
TEXT_COLOR = "white"
FONT_SIZE = 32
LINE_SPACING = 10
TEXT_WIDTH_RATIO = 0.8

GIF_FRAMES = 10
GIF_FRAME_STEP = 12  # px added to the text's y per frame
GIF_FRAME_DELAY_MS = 150
GIF_COLORS = 128

# format name -> (Pillow format, extension, content type)
POSTER_FORMATS = {
    "png": ("PNG", ".png", "image/png"),
    "jpeg": ("JPEG", ".jpg", "image/jpeg"),
    "jpg": ("JPEG", ".jpg", "image/jpeg"),
    "webp": ("WEBP", ".webp", "image/webp"),
}


def text_layout_engine() -> ImageFont.Layout:
    """RAQM shapes and reorders Arabic; BASIC draws unjoined glyphs left to right."""
    if features.check("raqm"):
        return ImageFont.Layout.RAQM
    logger.warning("libraqm not available, Arabic text will not be shaped")
    return ImageFont.Layout.BASIC


def load_font(font_path: Optional[Path], size: int) -> ImageFont.FreeTypeFont:
    if font_path and Path(font_path).exists():
        return ImageFont.truetype(str(font_path), size=size, layout_engine=text_layout_engine())
    logger.warning("Font not found (%s), using Pillow default", font_path)
    return ImageFont.load_default(size=size)


def wrap_text_by_width(text: str, font, max_width: int, draw: ImageDraw.ImageDraw) -> str:
    """Greedy word wrap on rendered pixel width; keeps existing line breaks."""
    lines: List[str] = []
    for paragraph in text.splitlines() or [""]:
        current: List[str] = []
        for word in paragraph.split():
            trial = " ".join(current + [word])
            if current and draw.textlength(trial, font=font) > max_width:
                lines.append(" ".join(current))
                current = [word]
            else:
                current.append(word)
        lines.append(" ".join(current))
    return "\n".join(lines)


def resolve_poster_format(fmt: str) -> Tuple[str, str, str]:
    try:
        return POSTER_FORMATS[(fmt or "").lower()]
    except KeyError:
        raise RenderError(f"Unsupported poster format: {fmt}") from None


class PosterRenderer:
    def __init__(
        self,
        backgrounds_dir: Path,
        font_path: Optional[Path] = None,
        canvas_size: Tuple[int, int] = CANVAS_SIZE,
        font_size: int = FONT_SIZE,
    ):
        self.backgrounds_dir = Path(backgrounds_dir)
        self.canvas_size = canvas_size
        self.font = load_font(font_path, font_size)

    def load_background(self, name: str) -> Image.Image:
        """Open a bundled background by bare file name."""
        if not name or Path(name).name != name:
            raise RenderError(f"Invalid background name: {name!r}")

        path = self.backgrounds_dir / name
        try:
            with Image.open(path) as img:
                return img.convert("RGBA")
        except (FileNotFoundError, UnidentifiedImageError, OSError) as e:
            raise RenderError(f"Cannot load background {name!r}") from e

    def compose(self, text: str, background: Image.Image, text_offset: int = 0) -> Image.Image:
        width, height = self.canvas_size
        canvas = Image.new("RGBA", self.canvas_size, (0, 0, 0, 255))

        # background fits inside 60% of the canvas, aspect preserved
        scale = min(width * BACKGROUND_SCALE / background.width, height * BACKGROUND_SCALE / background.height)
        bg_size = (max(1, round(background.width * scale)), max(1, round(background.height * scale)))
        scaled = background.resize(bg_size, Image.Resampling.LANCZOS)
        canvas.alpha_composite(scaled, dest=((width - bg_size[0]) // 2, (height - bg_size[1]) // 2))

        canvas = Image.alpha_composite(canvas, Image.new("RGBA", self.canvas_size, OVERLAY_COLOR))

        draw = ImageDraw.Draw(canvas)
        wrapped = wrap_text_by_width(text, self.font, int(width * TEXT_WIDTH_RATIO), draw)
        left, top, right, bottom = draw.multiline_textbbox(
            (0, 0), wrapped, font=self.font, spacing=LINE_SPACING, align="center"
        )
        x = (width - (right - left)) // 2 - left
        y = (height - (bottom - top)) // 2 - top + text_offset
        draw.multiline_text(
            (x, y), wrapped, fill=TEXT_COLOR, font=self.font, spacing=LINE_SPACING, align="center"
        )
        return canvas.convert("RGB")

    def render_poster(self, text: str, background: str, fmt: str, output_path: Path) -> Path:
        pil_format, _, _ = resolve_poster_format(fmt)
        image = self.compose(text, self.load_background(background))
        try:
            image.save(output_path, format=pil_format)
        except (OSError, ValueError, KeyError) as e:
            raise RenderError(f"Failed to encode poster as {fmt}") from e
        return output_path

    def build_frames(self, text: str, background: str) -> List[Image.Image]:
        if not text or not text.strip():
            # identical frames would be merged by the GIF encoder
            raise RenderError("Animation text is empty")

        bg = self.load_background(background)
        return [
            self.compose(text, bg, text_offset=i * GIF_FRAME_STEP).convert(
                "P", palette=Image.Palette.ADAPTIVE, colors=GIF_COLORS
            )
            for i in range(GIF_FRAMES)
        ]

    def render_gif(self, text: str, background: str, output_path: Path) -> Path:
        frames = self.build_frames(text, background)
        try:
            frames[0].save(
                output_path,
                format="GIF",
                save_all=True,
                append_images=frames[1:],
                duration=GIF_FRAME_DELAY_MS,
                loop=0,
            )
        except (OSError, ValueError) as e:
            raise RenderError("Failed to encode animation") from e
        return output_path


class PosterService:
    """Render into a staged file, upload it once encoding is finished, return the URL."""

    def __init__(self, renderer: PosterRenderer, store: ArtifactStore, staging_dir: Path):
        self.renderer = renderer
        self.store = store
        self.staging_dir = Path(staging_dir)

    async def create_poster(self, text: str, fmt: str, background: str) -> str:
        _, extension, content_type = resolve_poster_format(fmt)
        key = artifact_key(str(uuid.uuid4()), None, "poster", extension)

        with staged_file(self.staging_dir, suffix=extension) as path:
            await asyncio.to_thread(self.renderer.render_poster, text, background, fmt, path)
            url = await self.store.upload_file(path, key, content_type)

        logger.info("Poster uploaded: %s", key)
        return url

    async def create_gif(self, text: str, background: str) -> str:
        key = artifact_key(str(uuid.uuid4()), None, "gif")

        with staged_file(self.staging_dir, suffix=".gif") as path:
            # render_gif returns only after the encoder has closed the file
            await asyncio.to_thread(self.renderer.render_gif, text, background, path)
            url = await self.store.upload_file(path, key, content_type_for("gif"))

        logger.info("Animation uploaded: %s", key)
        return url
