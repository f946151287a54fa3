"""
Setup script for the Chat Word Cloud package.
"""

from setuptools import setup, find_packages

# Read the README for the long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Read requirements from requirements.txt
with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith('#')]

setup(
    name="chat-wordcloud",
    version="0.1.0",
    author="Your Name",
    author_email="your.email@example.com",
    description="Interactive word clouds from chat-export CSV files and styled JSON word lists",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/chat-wordcloud",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "chat_wordcloud": ["data/*.yaml"],
    },
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "chat-wordcloud=chat_wordcloud.__main__:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
