import asyncio
import base64
import io
import os
from typing import Any, Dict, Optional
from PIL import Image
from .errors import InvalidParameters, ScreenshotError
from .host import ViewportHost
from .logger import log
from .paths import screenshot_path

class ScreenshotService:
    """
    Delegates capture to the viewport's driver and, when asked for base64,
    optimizes the image for Vision LLMs (resize & JPEG compress).
    """

    def __init__(self, host: ViewportHost, max_width: int = 1920, max_height: int = 1080, quality: int = 80):
        self.host = host
        self.max_width = max_width
        self.max_height = max_height
        self.quality = quality

    async def capture(self, filename: Optional[str] = None, format: str = "path") -> Dict[str, Any]:
        if format not in ("path", "base64"):
            raise InvalidParameters(f"Invalid format '{format}': expected 'path' or 'base64'")
        path = screenshot_path(filename)
        await self.host.screenshot(path)
        log("DEBUG", "screenshot_captured", f"Captured screenshot to {path}", path=path)

        if format == "path":
            return {"status": "ok", "path": path, "format": "path"}

        try:
            data = await asyncio.to_thread(self._file_to_base64, path)
        except Exception as e:
            log("ERROR", "screenshot_encode_failed", "Failed to encode screenshot", path=path, error=str(e))
            raise ScreenshotError(f"Failed to read screenshot file: {e}")
        return {
            "status": "ok",
            "path": path,
            "format": "base64",
            "data": data,
            "size": os.path.getsize(path),
        }

    def _file_to_base64(self, path: str) -> str:
        with Image.open(path) as img:
            # Convert to RGB (in case of RGBA) for JPEG compatibility
            if img.mode in ('RGBA', 'P', 'LA'):
                img = img.convert('RGB')
            img = self._resize_image(img)
            return self._image_to_base64(img)

    def _resize_image(self, img: Image.Image) -> Image.Image:
        """
        Resizes image to fit within max dimensions while maintaining aspect ratio.
        """
        width, height = img.size

        if width <= self.max_width and height <= self.max_height:
            return img

        aspect_ratio = width / height

        if width > self.max_width:
            width = self.max_width
            height = int(width / aspect_ratio)

        if height > self.max_height:
            height = self.max_height
            width = int(height * aspect_ratio)

        return img.resize((width, height), Image.Resampling.LANCZOS)

    def _image_to_base64(self, img: Image.Image) -> str:
        buffered = io.BytesIO()
        img.save(buffered, format="JPEG", quality=self.quality, optimize=True)
        return base64.b64encode(buffered.getvalue()).decode('utf-8')
