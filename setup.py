# setup.py - 项目打包与安装配置

from setuptools import setup, find_packages

setup(
    name="ngp-nim",
    version="0.1.0",
    packages=find_packages(include=["ngp_nim", "ngp_nim.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pygame>=2.0.0",
    ],
    extras_require={
        "dev": [
            "black>=23.9.1",
            "flake8>=6.1.0",
            "isort>=5.12.0",
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
        "test": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "nim-server=ngp_nim.server.main:main",
            "nim-client=ngp_nim.client.main:main",
        ],
    },
)
