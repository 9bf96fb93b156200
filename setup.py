from pathlib import Path

from setuptools import find_packages, setup

NAME = "student-invoices"
VERSION = "0.1.0"

README = Path("README.md")
LONG_DESCRIPTION = README.read_text(encoding="utf-8") if README.exists() else ""

INSTALL_REQUIRES = [
    "openpyxl>=3.1",
    "reportlab>=4.0",
    "qrcode>=7.4",
    "Pillow>=9.1",
]

EXTRAS_REQUIRE = {
    "test": ["pytest>=7"],
}

setup(
    name=NAME,
    version=VERSION,
    description="Generate personalised PDF invoices for students from an Excel roster.",
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages("src"),
    package_data={"studentinvoices": ["resources/*.png"]},
    include_package_data=True,
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,
    entry_points={
        "console_scripts": [
            "student-invoices=studentinvoices.cli:main",
        ],
    },
)
