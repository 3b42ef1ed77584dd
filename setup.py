# setup.py
from setuptools import setup, find_packages

install_requires = [
    # --- MODELS & CONFIG ---
    "pydantic>=2.0.0",
    "pyyaml>=6.0.0",
    "python-dotenv>=1.0.0",
]

extras_require = {
    # --- TESTS---
    "test": [
        "pytest-asyncio==1.3.0",
        "pytest",
    ],
}

setup(
    name="marquee",
    version="1.0.0",
    description="Marquee|State - per-feature state containers for a catalog app",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    package_data={"marquee.shared": ["config/settings/*.yaml"]},
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "marquee-demo=marquee.app.main:main",
        ],
    },
    python_requires=">=3.10",
)
