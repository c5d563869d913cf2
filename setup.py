import pathlib

import setuptools

here = pathlib.Path(__file__).parent.resolve()

long_description = (here / "README.md").read_text(encoding="utf-8")

setuptools.setup(
    name="ethereum-tx-builder",
    version="1.0.0",
    description="Build and sign byte-exact legacy, EIP-1559 and EIP-7702 Ethereum transactions",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src", include=["ethereum_tx_builder*"]),
    install_requires=[
        "click>=8.1.0,<9",
        "coincurve>=20.0.0,<22",
        "ethereum-types>=0.2.1,<0.4",
        "pycryptodome>=3.22,<4",
        "pydantic>=2.10.0,<3",
        "pyyaml>=6.0.2,<7",
        "requests>=2.31.0,<3",
    ],
    extras_require={
        "test": [
            "pytest>=8,<9",
        ],
    },
    entry_points={
        "console_scripts": [
            "txbuild=ethereum_tx_builder.cli:txbuild",
        ],
    },
)
