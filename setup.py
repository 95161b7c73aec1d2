import io

from setuptools import find_packages, setup

from sqlcoro import __version__

with io.open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name='sqlcoro',
    version=__version__,
    description="Pull-based row iterators over query result sets, driven by "
                "coroutines that always release their row source",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires='>=3.8',
    install_requires=[
        'sqlalchemy>=1.4',
        'chardet',
    ],
    license='MIT',
    classifiers=[
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
    ],
    extras_require={
        "test": ["pytest"],
    },
)
