import os

from setuptools import setup, find_packages

version_file = os.path.join(os.path.dirname(__file__), "nal_syntax", "version.py")
with open(version_file, "r") as f:
    exec(f.read())

readme_file = os.path.join(os.path.dirname(__file__), "README.md")
with open(readme_file, "r") as f:
    long_description = f.read()

setup(
    name="nal_syntax",
    version=__version__,  # noqa: F821 -- loaded by 'exec' above
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    description="Syntax parser for HEVC and MPEG-2 video elementary streams.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="GPL-3.0-only",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Telecommunications Industry",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Operating System :: POSIX :: Linux",
        "Operating System :: Microsoft :: Windows",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="hevc h265 mpeg2 h262 nal bitstream parser",
    python_requires=">=3.8",
    install_requires=[
        "bitarray",
        "sentinels",
    ],
    extras_require={
        "tests": [
            "pytest",
            "mock",
        ],
    },
    entry_points={
        "console_scripts": [
            "nal-syntax-viewer=nal_syntax.scripts.nal_syntax_viewer:main",
        ],
    },
)
