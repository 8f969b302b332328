from setuptools import setup, find_packages

setup(
    name="audit_sweeper",
    version="0.1",
    packages=find_packages(exclude=["tests"]),
    package_data={"backend": ["config.yaml"]},
    install_requires=[
        "flask",
        "pyyaml",
        "numpy"
    ],
    extras_require={
        "test": ["pytest"]
    },
    entry_points={
        "console_scripts": [
            "audit-sweeper-ui=frontend.app:main"
        ]
    },
)
