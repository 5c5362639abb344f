import re
from pathlib import Path

from setuptools import setup

__version__ = re.search(
    r'^__version__ = "([^"]+)"', (Path(__file__).parent / "logfacet" / "__init__.py").read_text(encoding="utf-8"), re.M
).group(1)

setup(
    name="logfacet",
    long_description="logfacet is a leveled, formattable logging library: sequence-numbered records with caller "
    "location, rendered through placeholder templates and colorized by severity.",
    version=__version__,
    packages=[
        "logfacet",
    ],
    include_package_data=True,
    install_requires=[
        "click>=8.0.3,<9.0.0",
        "pyyaml>=6.0.0,<7.0.0",
        "beartype>=0.17.0,<1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points="""
        [console_scripts]
        logfacet=logfacet.cli:cli
    """,
)
