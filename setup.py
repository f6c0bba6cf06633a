from setuptools import setup, find_packages

setup(
    name="winrpc",
    version="0.1.0",
    description="winrpc - XML-RPC window control server",
    author="winrpc Team",
    packages=find_packages(include=["winrpc", "winrpc.*"]),
    install_requires=[
        "pyzmq>=24.0.0",
        "httpx>=0.24.0",
        "opentelemetry-api>=1.14.0",
        "opentelemetry-sdk>=1.14.0",
        "opentelemetry-exporter-otlp>=1.14.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-benchmark",
            "pytest-cov",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-benchmark",
            "pytest-cov",
            "black",
            "isort",
            "pylint",
        ],
    },
    entry_points={
        "console_scripts": [
            "winrpc-server=winrpc.cli:main",
        ],
    },
    python_requires=">=3.9",
)
