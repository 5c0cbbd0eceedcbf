# setup.py
from setuptools import setup, find_packages

setup(
    name="kons",
    version="0.1.0",
    packages=find_packages(include=["kons", "kons.*", "kons_lsp", "kons_lsp.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pygls>=1.1,<2",
        "lsprotocol",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": [
            "kons-repl-server=kons_lsp.repl_server:main",
            "kons-ls=kons_lsp.server:main",
        ],
    },
    zip_safe=False,
)
