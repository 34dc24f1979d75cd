"""Sources for the two JavaScript libraries the page runs.

The document embeds ``d3`` and its ``d3-sankey`` extension. Offline rendering
inlines them from the ``sankeyview.vendor`` package resources (or any
directory); ``cdn()`` references pinned jsDelivr builds instead, and
``download_assets()`` fetches those builds into the vendor package.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib.resources import files
from pathlib import Path

import httpx

from sankeyview.exceptions import MissingAssetsError

logger = logging.getLogger(__name__)

D3_FILE = "d3.min.js"
D3_SANKEY_FILE = "d3-sankey.min.js"
ASSET_FILES = (D3_FILE, D3_SANKEY_FILE)

D3_VERSION = "7.9.0"
D3_SANKEY_VERSION = "0.12.3"


@dataclass(frozen=True)
class LibrarySources:
    """How the two libraries appear in the generated document.

    Exactly one of the pairs is used: inline source text (``d3_js`` and
    ``d3_sankey_js``) or external URLs (``d3_url`` and ``d3_sankey_url``).
    """

    d3_js: str | None = None
    d3_sankey_js: str | None = None
    d3_url: str | None = None
    d3_sankey_url: str | None = None

    @property
    def is_inline(self) -> bool:
        return self.d3_js is not None and self.d3_sankey_js is not None

    def script_tags(self) -> str:
        if self.is_inline:
            return f"<script>{self.d3_js}</script>\n<script>{self.d3_sankey_js}</script>"
        return f'<script src="{self.d3_url}"></script>\n<script src="{self.d3_sankey_url}"></script>'

    @classmethod
    def inline(cls, d3_js: str, d3_sankey_js: str) -> LibrarySources:
        return cls(d3_js=d3_js, d3_sankey_js=d3_sankey_js)

    @classmethod
    def bundled(cls) -> LibrarySources:
        """Inline the libraries shipped in ``sankeyview.vendor``.

        Raises:
            MissingAssetsError: If either file is not in the installed package.
        """
        asset_files = files("sankeyview.vendor")
        texts: dict[str, str] = {}
        for name in ASSET_FILES:
            try:
                texts[name] = (asset_files / name).read_text(encoding="utf-8")
            except (FileNotFoundError, OSError):
                continue
        missing = [name for name in ASSET_FILES if name not in texts]
        if missing:
            raise MissingAssetsError(missing, "sankeyview.vendor")
        return cls.inline(texts[D3_FILE], texts[D3_SANKEY_FILE])

    @classmethod
    def from_directory(cls, directory: str | Path) -> LibrarySources:
        """Inline ``d3.min.js`` and ``d3-sankey.min.js`` from a directory."""
        directory = Path(directory)
        missing = [name for name in ASSET_FILES if not (directory / name).is_file()]
        if missing:
            raise MissingAssetsError(missing, str(directory))
        return cls.inline(
            (directory / D3_FILE).read_text(encoding="utf-8"),
            (directory / D3_SANKEY_FILE).read_text(encoding="utf-8"),
        )

    @classmethod
    def cdn(
        cls,
        d3_version: str = D3_VERSION,
        d3_sankey_version: str = D3_SANKEY_VERSION,
    ) -> LibrarySources:
        """Reference pinned builds on jsDelivr. The page then needs network access."""
        return cls(
            d3_url=f"https://cdn.jsdelivr.net/npm/d3@{d3_version}/dist/d3.min.js",
            d3_sankey_url=f"https://cdn.jsdelivr.net/npm/d3-sankey@{d3_sankey_version}/dist/d3-sankey.min.js",
        )

    @classmethod
    def auto(cls) -> LibrarySources:
        """Bundled libraries when installed, otherwise the CDN."""
        try:
            return cls.bundled()
        except MissingAssetsError as e:
            logger.warning("%s Falling back to CDN script tags; run `sankeyview vendor` to bundle them.", e.message)
            return cls.cdn()

    @classmethod
    def from_mode(cls, mode: str, asset_dir: str | Path | None = None) -> LibrarySources:
        """Resolve a config/CLI mode string: ``auto``, ``bundled`` or ``cdn``.

        ``asset_dir`` takes precedence over the mode when given.
        """
        if asset_dir is not None:
            return cls.from_directory(asset_dir)
        if mode == "bundled":
            return cls.bundled()
        if mode == "cdn":
            return cls.cdn()
        if mode == "auto":
            return cls.auto()
        raise ValueError(f"Unknown library mode {mode!r}; expected 'auto', 'bundled' or 'cdn'")


def vendor_directory() -> Path:
    """Filesystem location of the ``sankeyview.vendor`` package."""
    return Path(str(files("sankeyview.vendor")))


def download_assets(
    directory: str | Path | None = None,
    *,
    client: httpx.Client | None = None,
    d3_version: str = D3_VERSION,
    d3_sankey_version: str = D3_SANKEY_VERSION,
    timeout: float = 30.0,
) -> list[Path]:
    """Download the pinned CDN builds so ``bundled()`` works offline.

    Args:
        directory: Where to write the files (default: ``vendor_directory()``)
        client: HTTP client to use; one is created and closed when omitted
        d3_version: d3 release to fetch
        d3_sankey_version: d3-sankey release to fetch
        timeout: Per-request timeout in seconds for the default client

    Returns:
        Paths of the written files, in ``ASSET_FILES`` order.

    Raises:
        httpx.HTTPError: On network failures or non-2xx responses. Nothing is
            written unless both downloads succeed.
    """
    target = Path(directory) if directory is not None else vendor_directory()
    sources = LibrarySources.cdn(d3_version, d3_sankey_version)
    urls = {D3_FILE: sources.d3_url, D3_SANKEY_FILE: sources.d3_sankey_url}

    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=timeout, follow_redirects=True)
    try:
        contents: dict[str, bytes] = {}
        for name in ASSET_FILES:
            logger.info("Downloading %s", urls[name])
            response = client.get(urls[name])
            response.raise_for_status()
            contents[name] = response.content
    finally:
        if owns_client:
            client.close()

    target.mkdir(parents=True, exist_ok=True)
    written = []
    for name in ASSET_FILES:
        path = target / name
        path.write_bytes(contents[name])
        written.append(path)
    return written
