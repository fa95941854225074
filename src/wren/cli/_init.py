"""``wren --init``: write starter config files into the served root."""

import logging
from importlib import resources
from pathlib import Path

logger = logging.getLogger("wren.cli")

# Target file name -> bundled asset name
INIT_FILES: dict[str, str] = {
    ".500.html": "500.html",
    ".404.html": "404.html",
    ".routes": "routes",
}


def init_project(root: str | Path = ".") -> list[Path]:
    """Copy the bundled error pages and route template into *root*.

    Existing files are left untouched. Returns the paths written.
    """
    root_path = Path(root)
    root_path.mkdir(parents=True, exist_ok=True)
    assets = resources.files("wren.assets")

    written: list[Path] = []
    for target_name, asset_name in INIT_FILES.items():
        target = root_path / target_name
        if target.exists():
            logger.warning("%s already exists, skipping", target)
            continue
        target.write_text(assets.joinpath(asset_name).read_text(encoding="utf-8"), encoding="utf-8")
        logger.info("Created %s", target)
        written.append(target)
    return written
