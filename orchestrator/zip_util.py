
"""
ZIP export of a generated app.

Packages the screens of one generation run as a starter project for either
framework:
- the code of every screen (React .jsx or Flutter .dart)
- every mockup image and the logo, decoded to PNG files
- a README with run instructions
"""

from pathlib import Path
from datetime import datetime
import base64
import logging
import os
import re
import shutil
import textwrap
import zipfile
from typing import Optional

from mockup_types import MockupResult
from response_utils import component_name, split_data_url

logger = logging.getLogger(__name__)

# Project root directory
BASE_DIR = Path(__file__).resolve().parents[1]
# Directory where exported ZIP files are stored
OUTPUT_DIR = Path(os.getenv("MOCKUP_OUTPUT_DIR", str(BASE_DIR / "generated_output")))

FRAMEWORKS = ("react", "flutter")


def _snake_name(title: str) -> str:
    words = re.findall(r"[A-Za-z0-9]+", title)
    return "_".join(w.lower() for w in words) or "screen"


def _image_stem(title: str) -> str:
    return "_".join(re.findall(r"[A-Za-z0-9]+", title)) or "screen"


def _unique(stem: str, used: set, separator: str = "_") -> str:
    """
    Return stem, or stem plus a numeric suffix, so no two files share a name.

    Names are compared case-insensitively so the archive also unpacks cleanly
    on case-insensitive file systems.
    """
    candidate = stem
    counter = 2
    while candidate.lower() in used:
        candidate = f"{stem}{separator}{counter}"
        counter += 1
    used.add(candidate.lower())
    return candidate


def _write_data_url(data_url: str, path: Path) -> None:
    _, payload = split_data_url(data_url)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(base64.b64decode(payload))


_RUN_STEPS = {
    "react": """
        1. Create a React app with Tailwind CSS configured (e.g. Vite + Tailwind).
        2. Copy src/screens/ into your app's src/ directory.
        3. Import a screen component and render it, e.g.:
           import LoginScreen from './screens/LoginScreen';
        """,
    "flutter": """
        1. Create a Flutter project: flutter create my_app
        2. Copy lib/screens/ into the project's lib/ directory.
        3. Use a screen widget as the home of your MaterialApp and run:
           flutter run
        """,
}


def _readme(framework: str, app_description: str, screen_files: list) -> str:
    lines = [
        f"Generated {framework.capitalize()} Screens",
        "",
        "App description:",
        app_description.strip() or "(none)",
        "",
        "Screens:",
    ]
    lines += [f"- {name}" for name in screen_files]
    lines += [
        "",
        "------------------------------",
        "HOW TO USE",
        "------------------------------",
        textwrap.dedent(_RUN_STEPS[framework]).strip(),
        "",
        "Mockup images are in mockups/ for reference.",
    ]
    return "\n".join(lines) + "\n"


def create_project_zip(
    result: MockupResult,
    framework: str,
    app_description: str = "",
    output_dir: Optional[Path] = None,
) -> Path:
    """
    Create a ZIP file with the generated screens as a React or Flutter project.

    Args:
        result: The generation result to export
        framework: "react" or "flutter"
        app_description: Original app description (included in README)
        output_dir: Where to put the ZIP; defaults to OUTPUT_DIR

    Returns:
        Path to the created ZIP file

    Raises:
        ValueError: If the framework is unknown or there is nothing to export
    """
    if framework not in FRAMEWORKS:
        raise ValueError(f"Unknown framework '{framework}'. Expected one of {FRAMEWORKS}.")
    screens = result.screens.successful_screens
    if not screens:
        raise ValueError("There are no generated screens to export.")

    output_dir = Path(output_dir or OUTPUT_DIR)
    output_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    temp_dir = output_dir / f"{framework}_project_{timestamp}"
    temp_dir.mkdir(parents=True, exist_ok=True)

    try:
        screen_files = []
        code_names = set()
        # "logo" is reserved for the app logo
        image_names = {"logo"}
        for screen in screens:
            if framework == "react":
                stem = _unique(component_name(screen.title) or "Screen", code_names, separator="")
                rel_path = Path("src") / "screens" / f"{stem}.jsx"
                code = screen.code.react
            else:
                stem = _unique(_snake_name(screen.title), code_names)
                rel_path = Path("lib") / "screens" / f"{stem}.dart"
                code = screen.code.flutter
            code_path = temp_dir / rel_path
            code_path.parent.mkdir(parents=True, exist_ok=True)
            code_path.write_text(code, encoding="utf-8")
            screen_files.append(rel_path.as_posix())

            image_name = _unique(_image_stem(screen.title), image_names) + ".png"
            _write_data_url(screen.image_url, temp_dir / "mockups" / image_name)

        if result.logo_url:
            _write_data_url(result.logo_url, temp_dir / "mockups" / "logo.png")

        (temp_dir / "README.txt").write_text(
            _readme(framework, app_description, screen_files), encoding="utf-8"
        )

        zip_path = output_dir / f"{framework}_project_{timestamp}.zip"
        with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED) as zf:
            for file in sorted(temp_dir.rglob("*")):
                if file.is_file():
                    zf.write(file, arcname=file.relative_to(temp_dir).as_posix())
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)

    logger.info("Exported %d screen(s) to %s", len(screens), zip_path)
    return zip_path
