from setuptools import find_packages, setup
import os

HERE = os.path.abspath(os.path.dirname(__file__))


def load_requirements(path: str) -> list[str]:
    """Load requirements from a local file.

    Must work under PEP 517 isolated builds (wheel-from-sdist), so resolve the
    path relative to this file and fail gracefully if the file isn't present.
    """
    req_path = os.path.join(HERE, path)
    try:
        with open(req_path, "r", encoding="utf-8") as f:
            return [line.strip() for line in f if line.strip() and not line.startswith("#")]
    except FileNotFoundError:
        return []

wordlist = 'wordlist' + os.sep + 'subdomains-100.txt'

setup(
    name='subprobe',
    version='2.0.0',
    description='Subdomain scanner with wildcard DNS filtering',
    license='MIT',
    packages=find_packages(include=["subprobe", "subprobe.*"]),
    package_data={"subprobe": [wordlist]},
    include_package_data=True,
    python_requires='>=3.9',
    install_requires=load_requirements("requirements.txt"),
    extras_require={
        "test": load_requirements("requirements-test.txt"),
    },
    entry_points={
        'console_scripts': [
            'subprobe=subprobe.cli:main',
        ],
    }
)
