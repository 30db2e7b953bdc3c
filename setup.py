from setuptools import setup

setup(
    name="hamlhtml",
    version="0.1.0",
    description="HAML-style indented markup to HTML converter",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=['hamlhtml'],
    python_requires=">=3.7",
    install_requires=[
        "watchdog",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["hamlhtml=hamlhtml.__main__:main"],
    },
)
