"""Setup for Habito.

Install for development:
    pip install -e ".[test]"

Build a macOS .app bundle:
    pip install py2app
    python setup.py py2app
"""

import sys

from setuptools import setup, find_packages

APP = ["main.py"]
DATA_FILES = []
OPTIONS = {
    "argv_emulation": False,
    "iconfile": None,
    "plist": {
        "CFBundleName": "Habito",
        "CFBundleDisplayName": "Habito",
        "CFBundleIdentifier": "com.habito.app",
        "CFBundleVersion": "0.1.0",
        "CFBundleShortVersionString": "0.1.0",
        "NSHighResolutionCapable": True,
        "LSMinimumSystemVersion": "13.0",
    },
}

py2app_args = {}
if "py2app" in sys.argv:
    py2app_args = {
        "app": APP,
        "data_files": DATA_FILES,
        "options": {"py2app": OPTIONS},
        "setup_requires": ["py2app"],
    }

setup(
    name="Habito",
    version="0.1.0",
    description="Personal self-tracking with persistent Pomodoro, ultradian and manual timers",
    packages=find_packages(include=["habito", "habito.*"]),
    install_requires=[
        "PyQt6",
        "SQLAlchemy>=2.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "gui_scripts": [
            "habito=habito.__main__:main",
        ],
    },
    python_requires=">=3.10",
    **py2app_args,
)
