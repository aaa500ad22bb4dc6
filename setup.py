"""
Setup configuration for Wallet Agent
"""

from setuptools import setup, find_packages

setup(
    name="wallet-agent",
    version="0.1.0",
    description="Single-session on-chain conversational agent with LangGraph and Gemini",
    author="Wallet Agent Team",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*", "docs"]),
    py_modules=["main", "agent_logic"],
    install_requires=[
        "fastapi>=0.110",
        "uvicorn>=0.29",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "python-dotenv>=1.0",
        "slowapi>=0.1.9",
        "requests>=2.31",
        "langchain-core>=0.3",
        "langchain-google-genai>=2.0",
        "langgraph>=0.2",
        "cryptography>=42.0",
        "base58>=2.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.23",
            "httpx>=0.27",
        ],
    },
    entry_points={
        "console_scripts": [
            "wallet-agent=main:serve",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
