"""
Tests for the React/Flutter project ZIP export.

Run with: pytest tests/test_zip_util.py -v
"""

import base64
import zipfile

import pytest

from mockup_types import GenerateAppScreensResult, GeneratedScreen, MockupResult, ScreenCode
from orchestrator.zip_util import create_project_zip
from tests.helpers import PNG_B64, PNG_DATA_URL


def make_result(logo=True):
    screens = [
        GeneratedScreen("Login Screen", PNG_DATA_URL, ScreenCode("// react login", "// dart login")),
        GeneratedScreen("Food Details", PNG_DATA_URL, ScreenCode("// react details", "// dart details")),
    ]
    return MockupResult(
        screens=GenerateAppScreensResult(successful_screens=screens),
        logo_url=PNG_DATA_URL if logo else None,
    )


class TestProjectZip:
    def test_react_layout(self, tmp_path):
        zip_path = create_project_zip(make_result(), "react", "A food app", output_dir=tmp_path)
        with zipfile.ZipFile(zip_path) as zf:
            names = set(zf.namelist())
            assert names == {
                "README.txt",
                "mockups/Food_Details.png",
                "mockups/Login_Screen.png",
                "mockups/logo.png",
                "src/screens/FoodDetails.jsx",
                "src/screens/LoginScreen.jsx",
            }
            assert zf.read("src/screens/LoginScreen.jsx").decode() == "// react login"
            assert zf.read("mockups/logo.png") == base64.b64decode(PNG_B64)
            readme = zf.read("README.txt").decode()
            assert "A food app" in readme
            assert "- src/screens/LoginScreen.jsx" in readme

    def test_flutter_layout_without_logo(self, tmp_path):
        zip_path = create_project_zip(make_result(logo=False), "flutter", output_dir=tmp_path)
        with zipfile.ZipFile(zip_path) as zf:
            names = set(zf.namelist())
        assert "lib/screens/login_screen.dart" in names
        assert "lib/screens/food_details.dart" in names
        assert "mockups/logo.png" not in names

    def test_temporary_directory_is_removed(self, tmp_path):
        zip_path = create_project_zip(make_result(), "flutter", output_dir=tmp_path)
        assert [p.name for p in tmp_path.iterdir()] == [zip_path.name]

    def test_duplicate_titles_get_numbered_files(self, tmp_path):
        screens = [
            GeneratedScreen("Login", PNG_DATA_URL, ScreenCode("// react one", "// dart one")),
            GeneratedScreen("Login", PNG_DATA_URL, ScreenCode("// react two", "// dart two")),
            GeneratedScreen("Log-in", PNG_DATA_URL, ScreenCode("// react three", "// dart three")),
        ]
        result = MockupResult(screens=GenerateAppScreensResult(successful_screens=screens))

        react_zip = create_project_zip(result, "react", output_dir=tmp_path)
        with zipfile.ZipFile(react_zip) as zf:
            assert zf.read("src/screens/Login.jsx").decode() == "// react one"
            assert zf.read("src/screens/Login2.jsx").decode() == "// react two"
            assert zf.read("src/screens/Login3.jsx").decode() == "// react three"
            assert {"mockups/Login.png", "mockups/Login_2.png", "mockups/Log_in.png"} <= set(zf.namelist())
            readme = zf.read("README.txt").decode()
            assert "- src/screens/Login2.jsx" in readme

        flutter_zip = create_project_zip(result, "flutter", output_dir=tmp_path)
        with zipfile.ZipFile(flutter_zip) as zf:
            assert zf.read("lib/screens/login.dart").decode() == "// dart one"
            assert zf.read("lib/screens/login_2.dart").decode() == "// dart two"
            assert zf.read("lib/screens/log_in.dart").decode() == "// dart three"

    def test_screen_titled_logo_keeps_the_app_logo(self, tmp_path):
        screens = [GeneratedScreen("Logo", PNG_DATA_URL, ScreenCode("// r", "// d"))]
        result = MockupResult(screens=GenerateAppScreensResult(successful_screens=screens), logo_url=PNG_DATA_URL)
        with zipfile.ZipFile(create_project_zip(result, "react", output_dir=tmp_path)) as zf:
            assert {"mockups/logo.png", "mockups/Logo_2.png"} <= set(zf.namelist())

    def test_path_like_titles_stay_inside_the_archive(self, tmp_path):
        out = tmp_path / "out"
        screens = [GeneratedScreen("../../escaped", PNG_DATA_URL, ScreenCode("// r", "// d"))]
        result = MockupResult(screens=GenerateAppScreensResult(successful_screens=screens))

        zip_path = create_project_zip(result, "react", output_dir=out)

        assert sorted(p.name for p in out.iterdir()) == [zip_path.name]
        assert not any(p.name == "escaped.png" for p in tmp_path.rglob("*"))
        with zipfile.ZipFile(zip_path) as zf:
            assert "mockups/escaped.png" in zf.namelist()
            assert all(".." not in name for name in zf.namelist())

    def test_unknown_framework(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown framework"):
            create_project_zip(make_result(), "swiftui", output_dir=tmp_path)

    def test_nothing_to_export(self, tmp_path):
        empty = MockupResult(screens=GenerateAppScreensResult())
        with pytest.raises(ValueError, match="no generated screens"):
            create_project_zip(empty, "react", output_dir=tmp_path)
